from datetime import datetime

import pytz

from linear_app.analytics.prompt.spec_chart import (
    apply_spec_filter,
    bucket_from_spec,
    build_chart_from_spec,
    group_from_spec,
    round_half_up,
)
from linear_app.core.models import ChartSpec, CycleRef, IssueFilters, IssueModel, PersonRef, StateRef

NOW = datetime(2024, 2, 1, tzinfo=pytz.UTC)


def _sample_issues():
    return [
        IssueModel(
            "1",
            "a",
            datetime(2024, 1, 2, tzinfo=pytz.UTC),
            None,
            priority=0,
            labels=["bug"],
            estimate=3,
            team="Core",
            state=StateRef("s", "Doing", "started"),
            creator=PersonRef("u1", "Alice"),
        ),
        IssueModel("2", "b", datetime(2024, 1, 3, tzinfo=pytz.UTC), None, priority=1, labels=["bug"], estimate=2),
        IssueModel("3", "c", datetime(2024, 1, 9, tzinfo=pytz.UTC), None, priority=0, labels=["feature"], team="Core"),
        IssueModel("4", "d", None, datetime(2024, 1, 10, tzinfo=pytz.UTC), priority=0, labels=["bug"], estimate=1),
    ]


def test_apply_spec_filter_overlays_known_keys():
    base = IssueFilters(time="30d", state="started")
    out = apply_spec_filter(base, "type=bug&labels=a, b&projectId=p1&bogus=1&priority=")
    assert out.type == "bug"
    assert out.labels == ["a", "b"]
    assert out.project_id == "p1"
    assert out.time == "30d"
    assert out.state == "started"
    assert base.type is None


def test_apply_spec_filter_ignores_invalid_type():
    assert apply_spec_filter(None, "type=epic").type is None
    assert apply_spec_filter(None, None) == IssueFilters()


def test_bucket_from_spec_axes():
    issue = _sample_issues()[0]
    assert bucket_from_spec(issue, "week") == "2024-W01"
    assert bucket_from_spec(issue, "priority") == "Urgent"
    assert bucket_from_spec(issue, "assignee") == "Unassigned"
    assert bucket_from_spec(issue, "creator") == "Alice"
    assert bucket_from_spec(issue, "stateType") == "started"
    assert bucket_from_spec(issue, "severity") == "Unknown"
    assert bucket_from_spec(issue, "cycle") == "No cycle"
    assert bucket_from_spec(issue, "status") == "Other"


def test_week_bucket_falls_back_to_updated_then_now():
    issue = _sample_issues()[3]
    assert bucket_from_spec(issue, "week") == "2024-W02"
    bare = IssueModel("x", None, None, None)
    assert bucket_from_spec(bare, "week", now=NOW) == "2024-W05"


def test_group_from_spec():
    issue = _sample_issues()[0]
    issue.cycle = CycleRef("c1", 2, "")
    assert group_from_spec(issue, "team") == "Core"
    assert group_from_spec(issue, "cycle") == "Cycle 2"
    assert group_from_spec(issue, "bogus") == "Other"


def test_pie_ignores_grouping():
    spec = ChartSpec(kind="pie", x_axis="priority", group_by="team")
    payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
    assert payload.data == [{"name": "Urgent", "value": 3}, {"name": "High", "value": 1}]
    assert payload.group_names == []


def test_ungrouped_bar_and_scatter_keys():
    spec = ChartSpec(kind="bar", x_axis="priority")
    payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
    assert payload.data == [{"x": "Urgent", "value": 3}, {"x": "High", "value": 1}]
    spec = ChartSpec(kind="scatter", x_axis="priority", y_axis="sumEstimate")
    payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
    assert payload.data == [{"x": "Urgent", "y": 4}, {"x": "High", "y": 2}]


def test_grouped_payload_lists_every_group():
    spec = ChartSpec(kind="bar", x_axis="week", group_by="team")
    payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
    assert payload.data == [
        {"x": "2024-W01", "Core": 1, "Unknown": 1},
        {"x": "2024-W02", "Core": 1, "Unknown": 1},
    ]
    assert payload.group_names == ["Core", "Unknown"]


def test_average_estimate_rounds_half_up():
    issues = _sample_issues()
    issues[2].estimate = 0.125
    issues[3].estimate = None
    spec = ChartSpec(kind="bar", x_axis="priority", y_axis="avgEstimate", filter="type=feature")
    payload = build_chart_from_spec(issues, None, spec, now=NOW)
    assert payload.data == [{"x": "Urgent", "value": 0.13}]
    assert round_half_up(2.675) == 2.68
    assert round_half_up(1 / 3) == 0.33


def test_unknown_axis_degrades_to_other_bucket():
    spec = ChartSpec.from_payload({"type": "sparkline", "xAxis": "mood", "yAxis": "median", "groupBy": "null"})
    assert spec.kind == "bar"
    assert spec.y_axis == "count"
    assert spec.group_by is None
    payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
    assert payload.data == [{"x": "Other", "value": 4}]


def test_base_filters_and_sub_filter_both_apply():
    spec = ChartSpec(kind="bar", x_axis="priority", filter="type=bug")
    payload = build_chart_from_spec(_sample_issues(), IssueFilters(priority="Urgent"), spec, now=NOW)
    assert payload.data == [{"x": "Urgent", "value": 2}]


def test_literal_null_group_by_builds_ungrouped_chart():
    for group_by in ("null", "None", "", " none "):
        spec = ChartSpec(kind="bar", x_axis="priority", group_by=group_by)
        assert spec.grouped is False
        payload = build_chart_from_spec(_sample_issues(), None, spec, now=NOW)
        assert payload.data == [{"x": "Urgent", "value": 3}, {"x": "High", "value": 1}]
        assert payload.group_names == []


def test_sub_filter_values_are_not_url_decoded():
    out = apply_spec_filter(None, "labels=c++,100%done&state=in%20review")
    assert out.labels == ["c++", "100%done"]
    assert out.state == "in%20review"
    assert apply_spec_filter(None, "priority=High=1").priority == "High=1"
