"""Enumerate the distinct filter options present in an issue snapshot.

Collectors are fed the unfiltered snapshot so dropdowns always list the full
universe of values regardless of the active selection.
"""

from __future__ import annotations

from collections.abc import Iterable

from linear_app.core.classifiers import priority_label, severity_label
from linear_app.core.models import IssueModel, PersonRef


def _collect_people(people: Iterable[PersonRef | None]) -> list[dict[str, str | None]]:
    seen: dict[str, str | None] = {}
    for person in people:
        # First-seen name wins when an id repeats
        if person is not None and person.id not in seen:
            seen[person.id] = person.name
    return [{"id": pid, "name": name} for pid, name in seen.items()]


def collect_assignees(issues: Iterable[IssueModel]) -> list[dict[str, str | None]]:
    return _collect_people(issue.assignee for issue in issues)


def collect_creators(issues: Iterable[IssueModel]) -> list[dict[str, str | None]]:
    return _collect_people(issue.creator for issue in issues)


def collect_cycles(issues: Iterable[IssueModel]) -> list[dict[str, object]]:
    seen: dict[str, dict[str, object]] = {}
    for issue in issues:
        cycle = issue.cycle
        if cycle is not None and cycle.id not in seen:
            seen[cycle.id] = {"id": cycle.id, "name": cycle.name, "number": cycle.number}
    return list(seen.values())


def collect_projects(issues: Iterable[IssueModel]) -> list[dict[str, str | None]]:
    seen: dict[str, str | None] = {}
    for issue in issues:
        project = issue.project
        if project is not None and project.id not in seen:
            seen[project.id] = project.name
    return [{"id": pid, "name": name} for pid, name in seen.items()]


def collect_states(issues: Iterable[IssueModel]) -> list[str]:
    return sorted({issue.state.type for issue in issues if issue.state and issue.state.type})


def collect_severities(issues: Iterable[IssueModel]) -> list[str]:
    return sorted({severity_label(issue) for issue in issues})


def collect_priorities(issues: Iterable[IssueModel]) -> list[str]:
    return sorted({priority_label(issue) for issue in issues})


def collect_labels(issues: Iterable[IssueModel]) -> list[str]:
    return sorted({str(name) for issue in issues for name in issue.labels or [] if name})
