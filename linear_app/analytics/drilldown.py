"""Recover the issues behind one bucket (and series) of a rendered chart."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from linear_app.analytics.metrics.timeline import iso_week_label, utc_now
from linear_app.analytics.prompt.spec_chart import bucket_from_spec, group_from_spec, scope_for_spec
from linear_app.analytics.segments.filters import filter_issues
from linear_app.core.classifiers import (
    assignee_label,
    infer_issue_type,
    priority_label,
    severity_label,
    state_type_label,
)
from linear_app.core.config import (
    CHART_ALIASES,
    CHART_BUGS_BY_ASSIGNEE,
    CHART_BUGS_BY_PRIORITY,
    CHART_BUGS_BY_SEVERITY,
    CHART_BUGS_BY_STATE,
    CHART_ISSUES_BY_STATE,
    CHART_PROMPT,
    CHART_THROUGHPUT,
)
from linear_app.core.models import ChartSpec, IssueFilters, IssueModel

BucketFn = Callable[[IssueModel], str | None]


def _is_bug(issue: IssueModel) -> bool:
    return infer_issue_type(issue) == "bug"


def _is_completed(issue: IssueModel) -> bool:
    return issue.completed is not None


def _completed_week(issue: IssueModel) -> str | None:
    return iso_week_label(issue.completed)


# chart -> (scope predicate, bucket function); mirrors the dashboard aggregators
FIXED_CHARTS: dict[str, tuple[Callable[[IssueModel], bool], BucketFn]] = {
    CHART_THROUGHPUT: (_is_completed, _completed_week),
    CHART_ISSUES_BY_STATE: (lambda issue: True, state_type_label),
    CHART_BUGS_BY_STATE: (_is_bug, state_type_label),
    CHART_BUGS_BY_ASSIGNEE: (_is_bug, assignee_label),
    CHART_BUGS_BY_PRIORITY: (_is_bug, priority_label),
    CHART_BUGS_BY_SEVERITY: (_is_bug, severity_label),
}


def normalize_chart_name(chart: str | None) -> str | None:
    if not chart:
        return None
    text = str(chart).strip()
    return CHART_ALIASES.get(text.lower(), text)


def resolve_drill_down(
    issues: Iterable[IssueModel],
    filters: IssueFilters | None,
    chart: str,
    bucket: str | None = None,
    series: str | None = None,
    spec: ChartSpec | None = None,
    *,
    now: datetime | None = None,
) -> list[IssueModel]:
    """Issues that contributed to one chart cell.

    Parameters
    ----------
    issues : Iterable[IssueModel]
        Raw issue snapshot (the same one the chart was built from).
    filters : IssueFilters or None
        Base filter selection the chart was built with.
    chart : str
        Chart identifier (``throughput``, ``bugs_by_state``, ..., ``prompt``);
        the camelCase names used by the web client are accepted too.
    bucket : str, optional
        Bucket key. When omitted the chart's whole scope is returned.
    series : str, optional
        Group name for grouped prompt charts. When omitted on a grouped spec,
        every issue in the bucket is returned regardless of its group.
    spec : ChartSpec, optional
        Required for ``prompt`` charts; without it nothing matches.

    Returns
    -------
    list[IssueModel]
        Matching issues in snapshot order. Unknown chart identifiers return the
        base-filtered set.
    """
    now = now or utc_now()
    name = normalize_chart_name(chart)

    if name == CHART_PROMPT:
        if spec is None:
            return []
        scoped = scope_for_spec(issues, filters, spec, now=now)
        if bucket is None:
            return scoped
        matched = [issue for issue in scoped if bucket_from_spec(issue, spec.x_axis, now=now) == bucket]
        if not spec.grouped or series is None:
            return matched
        return [issue for issue in matched if group_from_spec(issue, spec.group_by) == series]

    scoped = filter_issues(issues, filters, now=now)
    if name not in FIXED_CHARTS:
        return scoped
    in_scope, bucket_fn = FIXED_CHARTS[name]
    charted = [issue for issue in scoped if in_scope(issue)]
    if bucket is None:
        return charted
    return [issue for issue in charted if bucket_fn(issue) == bucket]
