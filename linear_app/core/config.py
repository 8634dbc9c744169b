"""Central configuration, constants, enums, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Linear / OpenAI Connection Settings
# =============================================================================
LINEAR_API_URL = "https://api.linear.app/graphql"
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-4o-mini"
REQUEST_TIMEOUT_SECONDS = 60

# Issue snapshots are reused per team for this long before a refetch
ISSUE_CACHE_TTL_SECONDS: float = 30 * 60
ISSUE_PAGE_SIZE = 100

# =============================================================================
# Filter Vocabulary
# =============================================================================
# Relative windows offered by the UI (days counted back from "now")
TIME_WINDOW_DAYS: dict[str, int] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
}
# Unrecognized window values fall back to the widest window
DEFAULT_TIME_WINDOW_DAYS = 90

ALL = "all"

STATE_TYPES: Sequence[str] = (
    "triage",
    "backlog",
    "unstarted",
    "started",
    "completed",
    "canceled",
)

# Ordered: the first type whose name appears in any label wins
ISSUE_TYPES: Sequence[str] = ("bug", "feature", "chore")
OTHER_TYPE = "other"
TYPE_FILTER_VALUES: frozenset[str] = frozenset({*ISSUE_TYPES, ALL})

# =============================================================================
# Priority / Severity Configuration
# =============================================================================
NO_PRIORITY = "No Priority"

PRIORITY_LABELS: dict[int, str] = {
    0: "Urgent",
    1: "High",
    2: "Medium",
    3: "Low",
    4: NO_PRIORITY,
}

SEVERITY_LEVELS: Sequence[str] = ("critical", "major", "minor", "trivial")
UNKNOWN_SEVERITY = "Unknown"

# =============================================================================
# Placeholder Labels
# =============================================================================
UNASSIGNED = "Unassigned"
UNKNOWN_PERSON = "Unknown"
UNKNOWN_TEAM = "Unknown"
UNKNOWN_STATE = "unknown"
NO_CYCLE = "No cycle"
OTHER_BUCKET = "Other"

# =============================================================================
# Chart Specification Vocabulary
# =============================================================================
CHART_KINDS: Sequence[str] = ("bar", "line", "pie", "donut", "scatter")
ROUND_CHART_KINDS: frozenset[str] = frozenset({"pie", "donut"})
DEFAULT_CHART_KIND = "bar"

# "streamlit" styles Altair charts with the app theme; "altair" keeps Altair defaults
CHART_THEMES: Sequence[str] = ("streamlit", "altair")
DEFAULT_CHART_THEME = "streamlit"

X_AXES: Sequence[str] = ("week", "priority", "assignee", "creator", "stateType", "severity", "cycle")
Y_AXES: Sequence[str] = ("count", "avgEstimate", "sumEstimate")
DEFAULT_Y_AXIS = "count"
GROUP_BYS: Sequence[str] = ("priority", "team", "severity", "creator", "cycle")
UNGROUPED_VALUES: frozenset[str] = frozenset({"", "null", "none"})

# Keys accepted in a chart spec's ``key=value&key=value`` sub-filter, mapped to
# IssueFilters attributes
SPEC_FILTER_KEYS: dict[str, str] = {
    "type": "type",
    "state": "state",
    "assignee": "assignee_id",
    "creator": "creator_id",
    "cycle": "cycle_id",
    "severity": "severity",
    "priority": "priority",
    "labels": "labels",
    "projectId": "project_id",
}

# =============================================================================
# Drill-down Chart Identifiers
# =============================================================================
CHART_THROUGHPUT = "throughput"
CHART_ISSUES_BY_STATE = "issues_by_state"
CHART_BUGS_BY_STATE = "bugs_by_state"
CHART_BUGS_BY_ASSIGNEE = "bugs_by_assignee"
CHART_BUGS_BY_PRIORITY = "bugs_by_priority"
CHART_BUGS_BY_SEVERITY = "bugs_by_severity"
CHART_PROMPT = "prompt"

# Keys should be lowercase for case-insensitive matching
CHART_ALIASES: dict[str, str] = {
    "throughput": CHART_THROUGHPUT,
    "issues_by_state": CHART_ISSUES_BY_STATE,
    "issuesbystate": CHART_ISSUES_BY_STATE,
    "openvsclosed": CHART_ISSUES_BY_STATE,
    "bugs_by_state": CHART_BUGS_BY_STATE,
    "bugsbystate": CHART_BUGS_BY_STATE,
    "bugs_by_assignee": CHART_BUGS_BY_ASSIGNEE,
    "bugsbyassignee": CHART_BUGS_BY_ASSIGNEE,
    "bugs_by_priority": CHART_BUGS_BY_PRIORITY,
    "bugsbypriority": CHART_BUGS_BY_PRIORITY,
    "bugs_by_severity": CHART_BUGS_BY_SEVERITY,
    "bugsbyseverity": CHART_BUGS_BY_SEVERITY,
    "prompt": CHART_PROMPT,
}

# =============================================================================
# Column Sets
# =============================================================================
CSV_EXPORT_COLUMNS: Sequence[str] = (
    "Issue ID",
    "Issue Title",
    "URL",
    "Created At",
    "Updated At",
    "Completed At",
    "State ID",
    "State Name",
    "State Type",
    "Type",
    "Creator ID",
    "Creator Name",
    "Assignee ID",
    "Assignee Name",
    "Priority",
    "Severity",
    "Labels",
    "Team",
    "Project ID",
    "Project Name",
    "Estimate",
    "Cycle ID",
    "Cycle Number",
    "Cycle Name",
)

DRILLDOWN_COLUMNS: Sequence[str] = (
    "id",
    "title",
    "type",
    "creator",
    "assignee",
    "created_at",
    "status",
    "severity",
    "priority",
)


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"
    presets_file: str = "presets.yaml"
    export_filename: str = "linear-issues.csv"
    chart_export_filename: str = "linear-issues-chart.csv"


SETTINGS = AppSettings()
