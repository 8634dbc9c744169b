"""Domain data models for Linear issues, filter selections, and chart specs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any

from .config import (
    CHART_KINDS,
    DEFAULT_CHART_KIND,
    DEFAULT_Y_AXIS,
    GROUP_BYS,
    ROUND_CHART_KINDS,
    TIME_WINDOW_DAYS,
    TYPE_FILTER_VALUES,
    UNGROUPED_VALUES,
    X_AXES,
    Y_AXES,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PersonRef:
    id: str
    name: str | None = None


@dataclass(slots=True)
class StateRef:
    id: str | None
    name: str | None
    type: str | None


@dataclass(slots=True)
class ProjectRef:
    id: str
    name: str | None = None


@dataclass(slots=True)
class CycleRef:
    id: str
    number: int | None = None
    name: str | None = None


@dataclass(slots=True)
class IssueModel:
    id: str
    title: str | None
    created: datetime | None
    updated: datetime | None
    completed: datetime | None = None
    identifier: str | None = None
    url: str | None = None
    state: StateRef | None = None
    assignee: PersonRef | None = None
    creator: PersonRef | None = None
    priority: int | float | None = None
    labels: list[str] = field(default_factory=list)
    team: str | None = None
    project: ProjectRef | None = None
    cycle: CycleRef | None = None
    estimate: float | None = None


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class IssueFilters:
    """Sparse filter selection; a None field never constrains the result."""

    time: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    cycle_id: str | None = None
    state: str | None = None
    type: str | None = None
    assignee_id: str | None = None
    creator_id: str | None = None
    severity: str | None = None
    priority: str | None = None
    labels: list[str] | None = None
    project_id: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> IssueFilters:
        """Parse query-string style parameters (camelCase keys, comma separated labels)."""
        time = _clean(params.get("time"))
        type_ = _clean(params.get("type"))
        labels_raw = _clean(params.get("labels"))
        labels = [part.strip() for part in labels_raw.split(",") if part.strip()] if labels_raw else None
        return cls(
            time=time if time in TIME_WINDOW_DAYS else None,
            start_date=_clean(params.get("startDate")),
            end_date=_clean(params.get("endDate")),
            cycle_id=_clean(params.get("cycleId")),
            state=_clean(params.get("state")),
            type=type_ if type_ in TYPE_FILTER_VALUES else None,
            assignee_id=_clean(params.get("assigneeId")),
            creator_id=_clean(params.get("creatorId")),
            severity=_clean(params.get("severity")),
            priority=_clean(params.get("priority")),
            labels=labels or None,
            project_id=_clean(params.get("projectId")),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> IssueFilters:
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if values.get("labels") is not None:
            values["labels"] = [str(v) for v in values["labels"]]
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class ChartSpec:
    """Structured description of a dynamically requested chart."""

    kind: str = DEFAULT_CHART_KIND
    title: str = ""
    x_axis: str = "week"
    y_axis: str = DEFAULT_Y_AXIS
    group_by: str | None = None
    filter: str | None = None

    @property
    def grouped(self) -> bool:
        # "null"/"none"/"" mean ungrouped; pie and donut charts have no series dimension
        if self.group_by is None or self.group_by.strip().lower() in UNGROUPED_VALUES:
            return False
        return self.kind not in ROUND_CHART_KINDS

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ChartSpec:
        """Validate a model-supplied chart spec against the closed vocabularies.

        Parameters
        ----------
        payload : Mapping
            JSON object with ``type``, ``title``, ``xAxis``, ``yAxis``, ``groupBy``
            and optional ``filter`` keys.

        Returns
        -------
        ChartSpec
            Spec with unknown chart kinds coerced to ``bar`` and unknown y-axes to
            ``count``. Unknown x-axis or group-by values are kept as given; they
            bucket as "Other" downstream.
        """
        kind = str(payload.get("type") or DEFAULT_CHART_KIND).strip().lower()
        if kind not in CHART_KINDS:
            logger.warning("Unrecognized chart type %r; rendering as %s", kind, DEFAULT_CHART_KIND)
            kind = DEFAULT_CHART_KIND

        x_axis = str(payload.get("xAxis") or "").strip()
        if x_axis not in X_AXES:
            logger.warning("Unrecognized x-axis %r; issues will bucket as Other", x_axis)

        y_axis = str(payload.get("yAxis") or DEFAULT_Y_AXIS).strip()
        if y_axis not in Y_AXES:
            logger.warning("Unrecognized y-axis %r; counting issues instead", y_axis)
            y_axis = DEFAULT_Y_AXIS

        group_raw = payload.get("groupBy")
        group_by = None if group_raw is None else str(group_raw).strip()
        if group_by is not None and group_by.lower() in UNGROUPED_VALUES:
            group_by = None
        if group_by is not None and group_by not in GROUP_BYS:
            logger.warning("Unrecognized group-by %r; series will group as Other", group_by)

        return cls(
            kind=kind,
            title=str(payload.get("title") or ""),
            x_axis=x_axis,
            y_axis=y_axis,
            group_by=group_by,
            filter=_clean(payload.get("filter")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.kind,
            "title": self.title,
            "xAxis": self.x_axis,
            "yAxis": self.y_axis,
            "groupBy": self.group_by if self.group_by is not None else "null",
        }
        if self.filter:
            payload["filter"] = self.filter
        return payload
