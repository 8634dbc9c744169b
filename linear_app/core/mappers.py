"""Mapping raw Linear GraphQL issue nodes into IssueModel instances and DataFrames."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from linear_app.analytics.metrics.timeline import iso_week_label

from .classifiers import (
    assignee_label,
    creator_label,
    cycle_label,
    infer_issue_type,
    priority_label,
    severity_label,
    state_type_label,
)
from .models import CycleRef, IssueModel, PersonRef, ProjectRef, StateRef


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _person(node: Any) -> PersonRef | None:
    if not isinstance(node, dict) or not node.get("id"):
        return None
    return PersonRef(id=str(node["id"]), name=node.get("name"))


def _labels(node: Any) -> list[str]:
    # GraphQL returns {"nodes": [...]}; cached/normalized payloads may be a plain list
    if isinstance(node, dict):
        node = node.get("nodes")
    names: list[str] = []
    for item in node or []:
        if isinstance(item, dict):
            name = item.get("name")
        else:
            name = item
        if name:
            names.append(str(name))
    return names


def _number(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def map_issue(raw: dict[str, Any]) -> IssueModel:
    state_raw = raw.get("state") or None
    project_raw = raw.get("project") or None
    cycle_raw = raw.get("cycle") or None
    team_raw = raw.get("team") or None

    state = None
    if isinstance(state_raw, dict):
        state = StateRef(id=state_raw.get("id"), name=state_raw.get("name"), type=state_raw.get("type"))

    project = None
    if isinstance(project_raw, dict) and project_raw.get("id"):
        project = ProjectRef(id=str(project_raw["id"]), name=project_raw.get("name"))

    cycle = None
    if isinstance(cycle_raw, dict) and cycle_raw.get("id"):
        number = _number(cycle_raw.get("number"))
        cycle = CycleRef(
            id=str(cycle_raw["id"]),
            number=int(number) if number is not None else None,
            name=cycle_raw.get("name"),
        )

    return IssueModel(
        id=str(raw.get("id")),
        identifier=raw.get("identifier"),
        title=raw.get("title"),
        url=raw.get("url"),
        created=parse_dt(raw.get("createdAt")),
        updated=parse_dt(raw.get("updatedAt")),
        completed=parse_dt(raw.get("completedAt")),
        state=state,
        assignee=_person(raw.get("assignee")),
        creator=_person(raw.get("creator")),
        priority=_number(raw.get("priority")),
        labels=_labels(raw.get("labels")),
        team=team_raw.get("name") if isinstance(team_raw, dict) else None,
        project=project,
        cycle=cycle,
        estimate=_number(raw.get("estimate")),
    )


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    """One row per issue with the derived categorical columns used by aggregations."""
    rows = []
    for i in issues:
        rows.append(
            {
                "id": i.id,
                "identifier": i.identifier or i.id,
                "title": i.title,
                "created": i.created,
                "updated": i.updated,
                "completed": i.completed,
                "completed_week": iso_week_label(i.completed),
                "state_type": state_type_label(i),
                "state_name": i.state.name if i.state else None,
                "type": infer_issue_type(i),
                "assignee": assignee_label(i),
                "assignee_id": i.assignee.id if i.assignee else None,
                "creator": creator_label(i),
                "creator_id": i.creator.id if i.creator else None,
                "priority": i.priority,
                "priority_label": priority_label(i),
                "severity": severity_label(i),
                "labels": "; ".join(i.labels or []),
                "team": i.team,
                "project_id": i.project.id if i.project else None,
                "project_name": i.project.name if i.project else None,
                "cycle": cycle_label(i),
                "estimate": i.estimate,
            }
        )
    return pd.DataFrame(rows)
