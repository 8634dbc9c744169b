from datetime import datetime

import pytz

from linear_app.core.models import IssueFilters, IssueModel, PersonRef
from linear_app.features.dashboard import build_metrics

NOW = datetime(2024, 1, 15, tzinfo=pytz.UTC)


def _scenario():
    created = datetime(2024, 1, 1, tzinfo=pytz.UTC)
    return [
        IssueModel("A", "A", created, None, completed=datetime(2024, 1, 3, tzinfo=pytz.UTC), priority=0, labels=["bug"]),
        IssueModel("B", "B", created, None, priority=2, labels=["feature"]),
        IssueModel("C", "C", created, None, completed=datetime(2024, 1, 10, tzinfo=pytz.UTC), labels=["bug"]),
    ]


def test_end_to_end_scenario():
    metrics = build_metrics(_scenario(), None, now=NOW)
    assert len(metrics.throughput) == 2
    assert all(row["count"] == 1 for row in metrics.throughput)
    assert metrics.bugs_by_assignee == [{"name": "Unassigned", "count": 2}]
    assert sorted(metrics.severity_priority, key=lambda r: r["priority"]) == [
        {"severity": "Unknown", "priority": "No Priority", "count": 1},
        {"severity": "Unknown", "priority": "Urgent", "count": 1},
    ]
    assert metrics.scoped_count == 3


def test_collectors_ignore_active_filters():
    issues = _scenario()
    issues[1].assignee = PersonRef("u1", "Alice")
    metrics = build_metrics(issues, IssueFilters(type="bug"), now=NOW)
    assert metrics.scoped_count == 2
    assert metrics.assignees == [{"id": "u1", "name": "Alice"}]
    assert metrics.priorities == ["Medium", "No Priority", "Urgent"]
    assert metrics.bugs_by_priority == [{"name": "No Priority", "count": 1}, {"name": "Urgent", "count": 1}]


def test_as_dict_is_serializable():
    payload = build_metrics([], None, now=NOW).as_dict()
    assert payload["throughput"] == []
    assert payload["scoped_count"] == 0
