"""Pure helpers to build the dashboard payload (no Streamlit)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime

from linear_app.analytics.aggregations.bugs import (
    bugs_by_assignee,
    bugs_by_severity,
    bugs_by_state,
    issues_by_state,
    rollup_crosstab,
    severity_priority_crosstab,
)
from linear_app.analytics.aggregations.throughput import throughput_by_week
from linear_app.analytics.metrics import dimensions as dims
from linear_app.analytics.segments.filters import filter_issues
from linear_app.core.models import IssueFilters, IssueModel


@dataclass(slots=True)
class DashboardMetrics:
    throughput: list[dict[str, object]] = field(default_factory=list)
    issues_by_state: list[dict[str, object]] = field(default_factory=list)
    bugs_by_state: list[dict[str, object]] = field(default_factory=list)
    bugs_by_assignee: list[dict[str, object]] = field(default_factory=list)
    bugs_by_severity: list[dict[str, object]] = field(default_factory=list)
    bugs_by_priority: list[dict[str, object]] = field(default_factory=list)
    severity_priority: list[dict[str, object]] = field(default_factory=list)
    # Filter options, collected from the unfiltered snapshot
    assignees: list[dict[str, object]] = field(default_factory=list)
    creators: list[dict[str, object]] = field(default_factory=list)
    cycles: list[dict[str, object]] = field(default_factory=list)
    states: list[str] = field(default_factory=list)
    severities: list[str] = field(default_factory=list)
    priorities: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    projects: list[dict[str, object]] = field(default_factory=list)
    scoped_count: int = 0

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def build_metrics(
    issues: Sequence[IssueModel],
    filters: IssueFilters | None,
    *,
    now: datetime | None = None,
) -> DashboardMetrics:
    """Aggregate the filtered snapshot into every dashboard series.

    Chart series are computed from ``filter_issues(issues, filters)``; the
    dimension collectors always see the full snapshot.
    """
    scoped = filter_issues(issues, filters, now=now)
    crosstab = severity_priority_crosstab(scoped)
    return DashboardMetrics(
        throughput=throughput_by_week(scoped),
        issues_by_state=issues_by_state(scoped),
        bugs_by_state=bugs_by_state(scoped),
        bugs_by_assignee=bugs_by_assignee(scoped),
        bugs_by_severity=bugs_by_severity(scoped),
        bugs_by_priority=rollup_crosstab(crosstab, "priority"),
        severity_priority=crosstab,
        assignees=dims.collect_assignees(issues),
        creators=dims.collect_creators(issues),
        cycles=dims.collect_cycles(issues),
        states=dims.collect_states(issues),
        severities=dims.collect_severities(issues),
        priorities=dims.collect_priorities(issues),
        labels=dims.collect_labels(issues),
        projects=dims.collect_projects(issues),
        scoped_count=len(scoped),
    )
