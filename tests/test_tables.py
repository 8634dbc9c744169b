import csv
import io
from datetime import datetime

import pytz

from linear_app.core.config import CSV_EXPORT_COLUMNS, DRILLDOWN_COLUMNS
from linear_app.core.models import CycleRef, IssueModel, PersonRef, StateRef
from linear_app.visual.tables import drilldown_table, issues_to_csv


def _sample_issues():
    return [
        IssueModel(
            "id-1",
            'Title with "quotes", commas',
            datetime(2024, 1, 2, tzinfo=pytz.UTC),
            None,
            identifier="ENG-1",
            url="https://linear.app/acme/issue/ENG-1",
            state=StateRef("s1", "Done", "completed"),
            assignee=PersonRef("u1", "Alice"),
            priority=0,
            labels=["bug", "critical"],
            cycle=CycleRef("c1", 2, "Sprint"),
            estimate=3.0,
        ),
        IssueModel("id-2", "Plain", None, None),
    ]


def test_csv_has_header_and_quoted_rows():
    text = issues_to_csv(_sample_issues())
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == list(CSV_EXPORT_COLUMNS)
    assert len(rows) == 3
    first = dict(zip(rows[0], rows[1]))
    assert first["Issue ID"] == "ENG-1"
    assert first["Issue Title"] == 'Title with "quotes", commas'
    assert first["Type"] == "bug"
    assert first["Priority"] == "Urgent"
    assert first["Severity"] == "Critical"
    assert first["Labels"] == "bug; critical"
    assert first["Estimate"] == "3"
    assert first["Cycle Number"] == "2"
    second = dict(zip(rows[0], rows[2]))
    assert second["Issue ID"] == "id-2"
    assert second["Priority"] == "No Priority"
    assert second["Created At"] == ""
    assert text.splitlines()[0].startswith('"Issue ID"')


def test_csv_for_no_issues_is_header_only():
    rows = list(csv.reader(io.StringIO(issues_to_csv([]))))
    assert rows == [list(CSV_EXPORT_COLUMNS)]


def test_drilldown_table_columns():
    table = drilldown_table(_sample_issues())
    assert list(table.columns) == [*DRILLDOWN_COLUMNS, "url"]
    assert table.iloc[1]["assignee"] == "Unassigned"
    assert table.iloc[0]["status"] == "completed"
