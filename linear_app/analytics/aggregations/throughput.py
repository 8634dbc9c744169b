"""Completed-issue throughput aggregations."""

from __future__ import annotations

from collections.abc import Iterable

from linear_app.core.mappers import issues_to_dataframe
from linear_app.core.models import IssueModel


def throughput_by_week(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    """Completed issues per ISO week, ascending by week label.

    Issues without a completion timestamp are ignored. Labels are zero-padded
    and year-major, so the default lexicographic sort is chronological.
    """
    df = issues_to_dataframe(issues)
    if df.empty:
        return []
    done = df[df["completed_week"].notna()]
    if done.empty:
        return []
    counts = done.groupby("completed_week").size()
    return [{"week": str(week), "count": int(count)} for week, count in counts.items()]
