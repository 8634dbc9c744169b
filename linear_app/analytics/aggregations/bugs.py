"""Bug-focused categorical aggregations over an already filtered issue set."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from linear_app.core.mappers import issues_to_dataframe
from linear_app.core.models import IssueModel


def _frame(issues: Iterable[IssueModel], *, bugs_only: bool) -> pd.DataFrame:
    df = issues_to_dataframe(issues)
    if df.empty or not bugs_only:
        return df
    return df[df["type"] == "bug"]


def _counts(df: pd.DataFrame, column: str, *, sort: bool) -> list[tuple[str, int]]:
    if df.empty:
        return []
    grouped = df.groupby(column, sort=sort).size()
    return [(str(name), int(count)) for name, count in grouped.items()]


def issues_by_state(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    """Every issue counted by workflow state type, sorted by state name."""
    df = _frame(issues, bugs_only=False)
    return [{"name": name, "value": count} for name, count in _counts(df, "state_type", sort=True)]


def bugs_by_state(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    df = _frame(issues, bugs_only=True)
    return [{"name": name, "value": count} for name, count in _counts(df, "state_type", sort=True)]


def bugs_by_assignee(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    # First-seen order; the UI reorders as it likes
    df = _frame(issues, bugs_only=True)
    return [{"name": name, "count": count} for name, count in _counts(df, "assignee", sort=False)]


def bugs_by_severity(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    df = _frame(issues, bugs_only=True)
    return [{"name": name, "count": count} for name, count in _counts(df, "severity", sort=True)]


def severity_priority_crosstab(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    """Bug counts per (severity, priority) pair.

    Rows appear in order of first occurrence and only for pairs that occur.
    The counts sum to the number of bug-typed issues in ``issues``.
    """
    df = _frame(issues, bugs_only=True)
    if df.empty:
        return []
    grouped = df.groupby(["severity", "priority_label"], sort=False).size()
    return [
        {"severity": str(severity), "priority": str(priority), "count": int(count)}
        for (severity, priority), count in grouped.items()
    ]


def rollup_crosstab(rows: Iterable[dict[str, object]], dimension: str) -> list[dict[str, object]]:
    """Collapse cross-tab rows onto one dimension ("severity" or "priority").

    Returns name/count rows sorted by name.
    """
    totals: dict[str, int] = {}
    for row in rows:
        key = str(row.get(dimension))
        totals[key] = totals.get(key, 0) + int(row.get("count") or 0)
    return [{"name": name, "count": totals[name]} for name in sorted(totals)]


def bugs_by_priority(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    return rollup_crosstab(severity_priority_crosstab(issues), "priority")
