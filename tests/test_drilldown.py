from datetime import datetime

import pytz

from linear_app.analytics.drilldown import normalize_chart_name, resolve_drill_down
from linear_app.analytics.prompt.spec_chart import build_chart_from_spec
from linear_app.core.models import ChartSpec, IssueFilters, IssueModel, PersonRef, StateRef
from linear_app.features.dashboard import build_metrics

NOW = datetime(2024, 2, 1, tzinfo=pytz.UTC)


def _sample_issues():
    created = datetime(2024, 1, 2, tzinfo=pytz.UTC)
    alice = PersonRef("u1", "Alice")
    return [
        IssueModel("1", "a", created, None, completed=datetime(2024, 1, 3, tzinfo=pytz.UTC), priority=0,
                   labels=["bug", "major"], assignee=alice, state=StateRef("s1", "Done", "completed"), team="Core"),
        IssueModel("2", "b", created, None, priority=1, labels=["bug"], state=StateRef("s2", "Todo", "backlog")),
        IssueModel("3", "c", datetime(2024, 1, 10, tzinfo=pytz.UTC), None,
                   completed=datetime(2024, 1, 11, tzinfo=pytz.UTC), priority=0, labels=["feature"], team="Core"),
        IssueModel("4", "d", datetime(2024, 1, 10, tzinfo=pytz.UTC), None, labels=["Bug"], assignee=alice),
    ]


def _ids(issues):
    return [i.id for i in issues]


def test_chart_name_aliases():
    assert normalize_chart_name("bugsByAssignee") == "bugs_by_assignee"
    assert normalize_chart_name("openVsClosed") == "issues_by_state"
    assert normalize_chart_name("custom") == "custom"
    assert normalize_chart_name(None) is None


def test_fixed_chart_buckets_match_counts():
    issues = _sample_issues()
    metrics = build_metrics(issues, None, now=NOW)
    checks = {
        "throughput": (metrics.throughput, "week", "count"),
        "issues_by_state": (metrics.issues_by_state, "name", "value"),
        "bugs_by_state": (metrics.bugs_by_state, "name", "value"),
        "bugs_by_assignee": (metrics.bugs_by_assignee, "name", "count"),
        "bugs_by_priority": (metrics.bugs_by_priority, "name", "count"),
        "bugs_by_severity": (metrics.bugs_by_severity, "name", "count"),
    }
    for chart, (rows, key, value) in checks.items():
        assert rows, chart
        for row in rows:
            matched = resolve_drill_down(issues, None, chart, row[key], now=NOW)
            assert len(matched) == row[value], (chart, row)


def test_drilldown_respects_base_filters():
    issues = _sample_issues()
    out = resolve_drill_down(issues, IssueFilters(assignee_id="u1"), "bugsByAssignee", "Alice", now=NOW)
    assert _ids(out) == ["1", "4"]
    out = resolve_drill_down(issues, IssueFilters(priority="High"), "bugs_by_assignee", "Alice", now=NOW)
    assert out == []


def test_missing_bucket_returns_chart_scope():
    issues = _sample_issues()
    assert _ids(resolve_drill_down(issues, None, "bugs_by_state", now=NOW)) == ["1", "2", "4"]
    assert _ids(resolve_drill_down(issues, None, "unknown_chart", "x", now=NOW)) == ["1", "2", "3", "4"]


def test_prompt_chart_cells_match_counts():
    issues = _sample_issues()
    spec = ChartSpec(kind="bar", x_axis="week", group_by="team")
    payload = build_chart_from_spec(issues, None, spec, now=NOW)
    for row in payload.data:
        for group in payload.group_names:
            if group not in row:
                continue
            matched = resolve_drill_down(issues, None, "prompt", row["x"], group, spec, now=NOW)
            assert len(matched) == row[group]


def test_prompt_chart_ungrouped_and_without_spec():
    issues = _sample_issues()
    spec = ChartSpec(kind="donut", x_axis="priority", group_by="team", filter="type=bug")
    payload = build_chart_from_spec(issues, None, spec, now=NOW)
    for row in payload.data:
        matched = resolve_drill_down(issues, None, "prompt", row["name"], "ignored", spec, now=NOW)
        assert len(matched) == row["value"]
    assert resolve_drill_down(issues, None, "prompt", "Urgent", now=NOW) == []


def test_grouped_prompt_drilldown_without_series_returns_whole_bucket():
    issues = _sample_issues()
    spec = ChartSpec(kind="bar", x_axis="week", group_by="team")
    out = resolve_drill_down(issues, None, "prompt", "2024-W01", spec=spec, now=NOW)
    assert _ids(out) == ["1", "2"]


def test_literal_null_group_by_ignores_series():
    issues = _sample_issues()
    spec = ChartSpec(kind="bar", x_axis="priority", group_by="null")
    out = resolve_drill_down(issues, None, "prompt", "Urgent", "Other", spec, now=NOW)
    assert _ids(out) == ["1", "3"]
