from datetime import datetime

import pytz

from linear_app.analytics.aggregations.bugs import (
    bugs_by_assignee,
    bugs_by_priority,
    bugs_by_severity,
    bugs_by_state,
    issues_by_state,
    rollup_crosstab,
    severity_priority_crosstab,
)
from linear_app.analytics.aggregations.throughput import throughput_by_week
from linear_app.analytics.metrics.timeline import iso_week_label
from linear_app.core.models import IssueModel, PersonRef, StateRef


def _issue(issue_id, labels, priority=None, completed=None, state=None, assignee=None):
    return IssueModel(
        id=issue_id,
        title=f"Issue {issue_id}",
        created=datetime(2024, 1, 1, tzinfo=pytz.UTC),
        updated=None,
        completed=completed,
        priority=priority,
        labels=labels,
        state=StateRef(f"s-{state}", state, state) if state else None,
        assignee=assignee,
    )


def _sample_issues():
    alice = PersonRef("u1", "Alice")
    return [
        _issue("1", ["bug", "critical"], 0, datetime(2024, 1, 3, tzinfo=pytz.UTC), "completed", alice),
        _issue("2", ["bug"], 1, None, "started", alice),
        _issue("3", ["Bug", "minor"], 0, datetime(2024, 1, 10, tzinfo=pytz.UTC), "completed"),
        _issue("4", ["feature"], 2, datetime(2024, 1, 4, tzinfo=pytz.UTC), "started"),
        _issue("5", ["bug"], None, None, None),
    ]


def test_week_labels_follow_iso_rules():
    assert iso_week_label(datetime(2024, 1, 1, tzinfo=pytz.UTC)) == "2024-W01"
    assert iso_week_label(datetime(2023, 12, 31, tzinfo=pytz.UTC)) == "2023-W52"
    assert iso_week_label("2024-01-03T23:00:00-05:00") == "2024-W01"
    assert iso_week_label(None) is None


def test_throughput_counts_completed_per_week():
    out = throughput_by_week(_sample_issues())
    assert out == [{"week": "2024-W01", "count": 2}, {"week": "2024-W02", "count": 1}]
    assert throughput_by_week([]) == []
    assert throughput_by_week([_issue("x", [])]) == []


def test_state_counts_sorted_by_name():
    assert issues_by_state(_sample_issues()) == [
        {"name": "completed", "value": 2},
        {"name": "started", "value": 2},
        {"name": "unknown", "value": 1},
    ]
    assert bugs_by_state(_sample_issues()) == [
        {"name": "completed", "value": 2},
        {"name": "started", "value": 1},
        {"name": "unknown", "value": 1},
    ]


def test_bugs_by_assignee_first_seen_order():
    assert bugs_by_assignee(_sample_issues()) == [
        {"name": "Alice", "count": 2},
        {"name": "Unassigned", "count": 2},
    ]


def test_bugs_by_severity_sorted():
    assert bugs_by_severity(_sample_issues()) == [
        {"name": "Critical", "count": 1},
        {"name": "Minor", "count": 1},
        {"name": "Unknown", "count": 2},
    ]


def test_crosstab_conserves_bug_count():
    issues = _sample_issues()
    rows = severity_priority_crosstab(issues)
    assert sum(r["count"] for r in rows) == 4
    assert {"severity": "Critical", "priority": "Urgent", "count": 1} in rows
    assert {"severity": "Unknown", "priority": "No Priority", "count": 1} in rows


def test_rollup_and_bugs_by_priority():
    rows = severity_priority_crosstab(_sample_issues())
    assert rollup_crosstab(rows, "severity") == [
        {"name": "Critical", "count": 1},
        {"name": "Minor", "count": 1},
        {"name": "Unknown", "count": 2},
    ]
    assert bugs_by_priority(_sample_issues()) == [
        {"name": "High", "count": 1},
        {"name": "No Priority", "count": 1},
        {"name": "Urgent", "count": 2},
    ]


def test_empty_inputs_give_empty_series():
    assert bugs_by_state([]) == []
    assert bugs_by_assignee([_issue("f", ["feature"])]) == []
    assert severity_priority_crosstab([]) == []
