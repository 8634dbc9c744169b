"""Issue filter predicates composed into a single filter pass.

``filter_issues`` is the only scoping entry point; the dashboard, CSV export,
and chart drill-down all call it so their row counts always agree.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import pandas as pd

from linear_app.analytics.metrics.timeline import to_utc, utc_now, window_start
from linear_app.core.classifiers import infer_issue_type, priority_label, severity_label
from linear_app.core.config import ALL
from linear_app.core.models import IssueFilters, IssueModel, PersonRef


def _time_bounds(filters: IssueFilters, now: datetime) -> tuple[list[pd.Timestamp], pd.Timestamp | None]:
    # Window and explicit start both apply when set; the later one dominates
    starts: list[pd.Timestamp] = []
    if filters.time:
        starts.append(window_start(filters.time, now))
    if filters.start_date:
        explicit = to_utc(filters.start_date)
        if explicit is not None:
            starts.append(explicit)
    end = to_utc(filters.end_date) if filters.end_date else None
    return starts, end


def within_time(issue: IssueModel, starts: list[pd.Timestamp], end: pd.Timestamp | None) -> bool:
    # Only the creation timestamp is consulted
    created = to_utc(issue.created)
    if created is None:
        return True
    if any(created < start for start in starts):
        return False
    return not (end is not None and created > end)


def matches_state(issue: IssueModel, state: str | None) -> bool:
    if not state or state == ALL:
        return True
    state_type = issue.state.type if issue.state else None
    return state_type == state if state_type else False


def _matches_person(person: PersonRef | None, needle: str | None) -> bool:
    if not needle:
        return True
    if person is None:
        return False
    if person.id == needle:
        return True
    return needle.lower() in (person.name or "").lower()


def matches_assignee(issue: IssueModel, assignee_id: str | None) -> bool:
    return _matches_person(issue.assignee, assignee_id)


def matches_creator(issue: IssueModel, creator_id: str | None) -> bool:
    return _matches_person(issue.creator, creator_id)


def matches_cycle(issue: IssueModel, cycle_id: str | None) -> bool:
    if not cycle_id:
        return True
    return issue.cycle is not None and issue.cycle.id == cycle_id


def matches_severity(issue: IssueModel, severity: str | None) -> bool:
    if not severity or severity == ALL:
        return True
    return severity_label(issue) == severity


def matches_priority(issue: IssueModel, priority: str | None) -> bool:
    if not priority or priority == ALL:
        return True
    return priority_label(issue) == priority


def matches_project(issue: IssueModel, project_id: str | None) -> bool:
    if not project_id:
        return True
    return issue.project is not None and issue.project.id == project_id


def matches_labels(issue: IssueModel, labels: Iterable[str] | None) -> bool:
    """True when any issue label equals any wanted label (case-insensitive)."""
    wanted = {str(label).lower() for label in (labels or []) if label}
    if not wanted:
        return True
    return any(str(name).lower() in wanted for name in issue.labels or [])


def matches_type(issue: IssueModel, issue_type: str | None) -> bool:
    if not issue_type or issue_type == ALL:
        return True
    return infer_issue_type(issue) == issue_type


def filter_issues(
    issues: Iterable[IssueModel],
    filters: IssueFilters | None,
    *,
    now: datetime | None = None,
) -> list[IssueModel]:
    """Return the issues matching every active filter, in input order.

    Parameters
    ----------
    issues : Iterable[IssueModel]
        Issue snapshot; never mutated.
    filters : IssueFilters or None
        Active selection. Dimensions combine with AND; the label set matches
        when any one label is present.
    now : datetime, optional
        Reference time for relative windows (defaults to the current UTC time).

    Returns
    -------
    list[IssueModel]
        Matching issues.
    """
    if filters is None:
        return list(issues)
    starts, end = _time_bounds(filters, now or utc_now())
    return [
        issue
        for issue in issues
        if within_time(issue, starts, end)
        and matches_state(issue, filters.state)
        and matches_assignee(issue, filters.assignee_id)
        and matches_creator(issue, filters.creator_id)
        and matches_cycle(issue, filters.cycle_id)
        and matches_severity(issue, filters.severity)
        and matches_priority(issue, filters.priority)
        and matches_project(issue, filters.project_id)
        and matches_labels(issue, filters.labels)
        and matches_type(issue, filters.type)
    ]
