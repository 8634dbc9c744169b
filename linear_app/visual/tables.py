"""Issue table and CSV export helpers."""

from __future__ import annotations

import csv
from collections.abc import Iterable

import pandas as pd
import streamlit as st

from linear_app.core.classifiers import (
    assignee_label,
    creator_label,
    infer_issue_type,
    priority_label,
    severity_label,
    state_type_label,
)
from linear_app.core.config import CSV_EXPORT_COLUMNS, DRILLDOWN_COLUMNS, SETTINGS
from linear_app.core.models import IssueModel


def _text(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _csv_row(issue: IssueModel) -> list[str]:
    state, creator, assignee = issue.state, issue.creator, issue.assignee
    project, cycle = issue.project, issue.cycle
    values = [
        issue.identifier or issue.id,
        issue.title,
        issue.url,
        issue.created,
        issue.updated,
        issue.completed,
        state.id if state else None,
        state.name if state else None,
        state.type if state else None,
        infer_issue_type(issue),
        creator.id if creator else None,
        creator.name if creator else None,
        assignee.id if assignee else None,
        assignee.name if assignee else None,
        priority_label(issue),
        severity_label(issue),
        "; ".join(issue.labels or []),
        issue.team,
        project.id if project else None,
        project.name if project else None,
        issue.estimate,
        cycle.id if cycle else None,
        cycle.number if cycle else None,
        cycle.name if cycle else None,
    ]
    return [_text(v) for v in values]


def issues_to_csv(issues: Iterable[IssueModel]) -> str:
    """Quoted CSV with one row per issue, including derived type/severity/priority.

    Callers pass issues that already went through ``filter_issues`` or a chart
    drill-down so the export matches what the dashboard shows.
    """
    df = pd.DataFrame([_csv_row(issue) for issue in issues], columns=list(CSV_EXPORT_COLUMNS))
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def drilldown_table(issues: Iterable[IssueModel]) -> pd.DataFrame:
    rows = [
        {
            "id": issue.identifier or issue.id,
            "title": issue.title,
            "type": infer_issue_type(issue),
            "creator": creator_label(issue),
            "assignee": assignee_label(issue),
            "created_at": _text(issue.created),
            "status": state_type_label(issue),
            "severity": severity_label(issue),
            "priority": priority_label(issue),
            "url": issue.url or "",
        }
        for issue in issues
    ]
    return pd.DataFrame(rows, columns=[*DRILLDOWN_COLUMNS, "url"])


def render_issue_table(issues: Iterable[IssueModel], limit: int = SETTINGS.max_table_rows):
    table = drilldown_table(issues)
    cfg = {
        "url": st.column_config.LinkColumn(
            "Link",
            display_text=r"issue/([^/]+)",
            help="Open in Linear",
            width="small",
        )
    }
    st.dataframe(table.head(limit), hide_index=True, column_config=cfg)
    return table
