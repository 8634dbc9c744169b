"""Per-issue categorical derivations (type, severity, priority, bucket labels).

Every function here is total: it reads one issue and returns a label, never
raising on missing optional fields. Aggregators, drill-down, and CSV export
all share these so a bucket shown on a chart is exactly the bucket used to
recover its issues.
"""

from __future__ import annotations

import numbers

from .config import (
    ISSUE_TYPES,
    NO_CYCLE,
    NO_PRIORITY,
    OTHER_TYPE,
    PRIORITY_LABELS,
    SEVERITY_LEVELS,
    UNASSIGNED,
    UNKNOWN_PERSON,
    UNKNOWN_SEVERITY,
    UNKNOWN_STATE,
    UNKNOWN_TEAM,
)
from .models import IssueModel


def _label_names(issue: IssueModel) -> list[str]:
    return [str(name) for name in (issue.labels or []) if name is not None]


def infer_issue_type(issue: IssueModel) -> str:
    """Infer the issue type from label substrings.

    Parameters
    ----------
    issue : IssueModel
        Issue whose labels are inspected.

    Returns
    -------
    str
        One of "bug", "feature", "chore", "other". When several types match,
        bug wins over feature, which wins over chore.

    Examples
    --------
    >>> infer_issue_type(IssueModel("1", None, None, None, labels=["Feature", "Bug report"]))
    'bug'
    """
    lowered = [name.lower() for name in _label_names(issue)]
    for issue_type in ISSUE_TYPES:
        if any(issue_type in name for name in lowered):
            return issue_type
    return OTHER_TYPE


def severity_label(issue: IssueModel) -> str:
    """Best-effort severity classification from labels.

    The lookup runs in three passes:

    1. a label that is exactly one of critical/major/minor/trivial
       (case-insensitive) returns its capitalized form;
    2. otherwise the first label containing "severity" or starting with "sev"
       is inspected: an embedded level name returns that level, a colon returns
       the trimmed text after it, anything else returns the label itself;
    3. with no such label the result is "Unknown".

    Parameters
    ----------
    issue : IssueModel
        Issue whose labels are inspected.

    Returns
    -------
    str
        Severity label, "Unknown" when nothing matches.
    """
    names = _label_names(issue)
    for name in names:
        lowered = name.strip().lower()
        if lowered in SEVERITY_LEVELS:
            return lowered.capitalize()

    marker = next(
        (name for name in names if "severity" in name.lower() or name.strip().lower().startswith("sev")),
        None,
    )
    if marker is None:
        return UNKNOWN_SEVERITY
    lowered = marker.lower()
    for level in SEVERITY_LEVELS:
        if level in lowered:
            return level.capitalize()
    if ":" in marker:
        tail = marker.split(":", 1)[1].strip()
        # "sev:" with nothing after the colon keeps the raw label
        if tail:
            return tail
    return marker


def priority_label(issue: IssueModel) -> str:
    """Map Linear's numeric priority onto its display name.

    Examples
    --------
    >>> priority_label(IssueModel("1", None, None, None, priority=0))
    'Urgent'
    >>> priority_label(IssueModel("1", None, None, None, priority=7))
    'P7'
    >>> priority_label(IssueModel("1", None, None, None))
    'No Priority'
    """
    value = issue.priority
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return NO_PRIORITY
    if value != value:  # NaN
        return NO_PRIORITY
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if value in PRIORITY_LABELS:
        return PRIORITY_LABELS[value]
    return f"P{value}"


def state_type_label(issue: IssueModel) -> str:
    state_type = issue.state.type if issue.state else None
    return state_type or UNKNOWN_STATE


def assignee_label(issue: IssueModel) -> str:
    return (issue.assignee.name if issue.assignee else None) or UNASSIGNED


def creator_label(issue: IssueModel) -> str:
    return (issue.creator.name if issue.creator else None) or UNKNOWN_PERSON


def team_label(issue: IssueModel) -> str:
    return issue.team or UNKNOWN_TEAM


def cycle_label(issue: IssueModel) -> str:
    """Cycle name, else "Cycle {number}", else "No cycle"."""
    cycle = issue.cycle
    if cycle is None:
        return NO_CYCLE
    if cycle.name:
        return cycle.name
    if cycle.number is not None:
        return f"Cycle {cycle.number}"
    return NO_CYCLE
