"""Build generic chart payloads from a dynamic chart specification.

Specs come from ``ChartSpecGenerator``. Building a chart and
drilling into one of its cells both go through ``scope_for_spec``,
``bucket_from_spec`` and ``group_from_spec`` so a cell's value and the issues
listed for it always agree.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from linear_app.analytics.metrics.timeline import iso_week_label, utc_now
from linear_app.analytics.segments.filters import filter_issues
from linear_app.core.classifiers import (
    assignee_label,
    creator_label,
    cycle_label,
    priority_label,
    severity_label,
    state_type_label,
    team_label,
)
from linear_app.core.config import OTHER_BUCKET, ROUND_CHART_KINDS, SPEC_FILTER_KEYS, TYPE_FILTER_VALUES
from linear_app.core.models import ChartSpec, IssueFilters, IssueModel


@dataclass(slots=True)
class ChartPayload:
    data: list[dict[str, object]]
    group_names: list[str] = field(default_factory=list)
    x_key: str = "x"


@dataclass(slots=True)
class _Tally:
    total: float = 0
    count: int = 0
    groups: dict[str, _Tally] = field(default_factory=dict)

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1


def apply_spec_filter(filters: IssueFilters | None, filter_string: str | None) -> IssueFilters:
    """Overlay a ``key=value&key=value`` sub-filter onto the base filters.

    Recognized keys: type, state, assignee, creator, cycle, severity,
    priority, labels (comma separated) and projectId. Unknown keys and empty
    values are ignored. The base filters are left untouched.
    """
    base = filters or IssueFilters()
    if not filter_string:
        return replace(base)
    updates: dict[str, object] = {}
    # Values are taken literally: no URL decoding, so "c++" and "100%done" survive
    for pair in filter_string.strip().split("&"):
        key, _, value = pair.partition("=")
        key, value = key.strip(), value.strip()
        attr = SPEC_FILTER_KEYS.get(key)
        if attr is None or not value:
            continue
        if attr == "type" and value not in TYPE_FILTER_VALUES:
            continue
        if attr == "labels":
            updates[attr] = [part.strip() for part in value.split(",") if part.strip()]
        else:
            updates[attr] = value
    return replace(base, **updates)


def bucket_from_spec(issue: IssueModel, axis: str, *, now: datetime | None = None) -> str:
    if axis == "week":
        # Best-effort: fall back to the update time, then to now
        reference = issue.created or issue.updated or now or utc_now()
        return iso_week_label(reference) or OTHER_BUCKET
    if axis == "priority":
        return priority_label(issue)
    if axis == "assignee":
        return assignee_label(issue)
    if axis == "creator":
        return creator_label(issue)
    if axis == "stateType":
        return state_type_label(issue)
    if axis == "severity":
        return severity_label(issue)
    if axis == "cycle":
        return cycle_label(issue)
    return OTHER_BUCKET


def group_from_spec(issue: IssueModel, group_by: str) -> str:
    if group_by == "priority":
        return priority_label(issue)
    if group_by == "team":
        return team_label(issue)
    if group_by == "severity":
        return severity_label(issue)
    if group_by == "creator":
        return creator_label(issue)
    if group_by == "cycle":
        return cycle_label(issue)
    return OTHER_BUCKET


def round_half_up(value: float, places: int = 2) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_value(spec: ChartSpec, total: float, count: int) -> float:
    if spec.y_axis == "avgEstimate":
        return 0 if count == 0 else round_half_up(total / count)
    return total


def scope_for_spec(
    issues: Iterable[IssueModel],
    filters: IssueFilters | None,
    spec: ChartSpec,
    *,
    now: datetime | None = None,
) -> list[IssueModel]:
    return filter_issues(issues, apply_spec_filter(filters, spec.filter), now=now)


def build_chart_from_spec(
    issues: Iterable[IssueModel],
    filters: IssueFilters | None,
    spec: ChartSpec,
    *,
    now: datetime | None = None,
) -> ChartPayload:
    """Filter, bucket, group and total issues as described by ``spec``.

    Parameters
    ----------
    issues : Iterable[IssueModel]
        Raw issue snapshot.
    filters : IssueFilters or None
        Base filter selection; the spec's own sub-filter is layered on top.
    spec : ChartSpec
        Chart description.
    now : datetime, optional
        Reference time for relative windows and the week fallback.

    Returns
    -------
    ChartPayload
        ``data`` rows shaped for the chart kind (``name``/``value`` for pie and
        donut, ``x``/``value`` for bar and line, ``x``/``y`` for scatter, and
        ``x`` plus one key per group when grouped) and ``group_names`` listing
        every group seen in any bucket.
    """
    now = now or utc_now()
    scoped = scope_for_spec(issues, filters, spec, now=now)
    grouped = spec.grouped
    tallies: dict[str, _Tally] = {}

    for issue in scoped:
        bucket = bucket_from_spec(issue, spec.x_axis, now=now)
        value = 1 if spec.y_axis == "count" else (issue.estimate or 0)
        record = tallies.setdefault(bucket, _Tally())
        record.add(value)
        if grouped:
            group_key = group_from_spec(issue, spec.group_by)
            record.groups.setdefault(group_key, _Tally()).add(value)

    if spec.kind in ROUND_CHART_KINDS:
        data = [{"name": key, "value": format_value(spec, rec.total, rec.count)} for key, rec in tallies.items()]
        return ChartPayload(data=data)

    if not grouped:
        value_key = "y" if spec.kind == "scatter" else "value"
        data = [{"x": key, value_key: format_value(spec, rec.total, rec.count)} for key, rec in tallies.items()]
        return ChartPayload(data=data)

    data = []
    group_names: list[str] = []
    for key, rec in tallies.items():
        row: dict[str, object] = {"x": key}
        for group_name, grp in rec.groups.items():
            row[group_name] = format_value(spec, grp.total, grp.count)
            if group_name not in group_names:
                group_names.append(group_name)
        data.append(row)
    return ChartPayload(data=data, group_names=group_names)
