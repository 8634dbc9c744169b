"""Metrics dashboard page: filter widgets, charts, drill-down and CSV export."""

from __future__ import annotations

import streamlit as st

from linear_app.app import register_page
from linear_app.core.config import (
    ALL,
    CHART_BUGS_BY_ASSIGNEE,
    CHART_BUGS_BY_PRIORITY,
    CHART_BUGS_BY_SEVERITY,
    CHART_BUGS_BY_STATE,
    CHART_ISSUES_BY_STATE,
    CHART_THROUGHPUT,
    SETTINGS,
    TIME_WINDOW_DAYS,
)
from linear_app.core.models import IssueFilters
from linear_app.core.presets import FilterPresetStore
from linear_app.core.service import IssueService
from linear_app.features.dashboard import DashboardMetrics
from linear_app.visual import charts
from linear_app.visual.tables import render_issue_table

ANY = "(any)"

# chart id -> (title, metrics attribute, bucket field)
DRILLDOWN_SOURCES = {
    CHART_THROUGHPUT: ("Throughput by week", "throughput", "week"),
    CHART_ISSUES_BY_STATE: ("Issues by state", "issues_by_state", "name"),
    CHART_BUGS_BY_STATE: ("Bugs by state", "bugs_by_state", "name"),
    CHART_BUGS_BY_ASSIGNEE: ("Bugs by assignee", "bugs_by_assignee", "name"),
    CHART_BUGS_BY_PRIORITY: ("Bugs by priority", "bugs_by_priority", "name"),
    CHART_BUGS_BY_SEVERITY: ("Bugs by severity", "bugs_by_severity", "name"),
}


def reset_filter_widgets() -> None:
    """Drop filter widget state so the next run seeds widgets from ``active_filters``."""
    for key in [k for k in st.session_state if str(k).startswith("f_")]:
        del st.session_state[key]


def _choice(label: str, options: list[str], current: str | None, *, key: str) -> str | None:
    values = [ANY, *options]
    index = values.index(current) if current in values else 0
    picked = st.sidebar.selectbox(label, values, index=index, key=key)
    return None if picked == ANY else picked


def _people_choice(label: str, people: list[dict], current: str | None, *, key: str) -> str | None:
    names = {p["id"]: p.get("name") or p["id"] for p in people}
    ids = [ANY, *names]
    index = ids.index(current) if current in ids else 0
    picked = st.sidebar.selectbox(label, ids, index=index, format_func=lambda v: names.get(v, v), key=key)
    return None if picked == ANY else picked


def _filter_form(options: DashboardMetrics, current: IssueFilters, project_choices: list[dict]) -> IssueFilters:
    st.sidebar.subheader("Filters")
    time = _choice("Created within", list(TIME_WINDOW_DAYS), current.time, key="f_time")
    use_dates = st.sidebar.checkbox("Explicit date range", value=bool(current.start_date or current.end_date))
    start_date = end_date = None
    if use_dates:
        start = st.sidebar.date_input("Start date", value=None, key="f_start")
        end = st.sidebar.date_input("End date", value=None, key="f_end")
        start_date = start.isoformat() if start else None
        end_date = end.isoformat() if end else None
    cycles = {c["id"]: c.get("name") or f"Cycle {c.get('number')}" for c in options.cycles}
    cycle_ids = [ANY, *cycles]
    cycle_pick = st.sidebar.selectbox(
        "Cycle",
        cycle_ids,
        index=cycle_ids.index(current.cycle_id) if current.cycle_id in cycle_ids else 0,
        format_func=lambda v: cycles.get(v, v),
        key="f_cycle",
    )
    projects = {
        p["id"]: f"{p['name']} ({p['team']})" if p.get("team") else p["name"] for p in project_choices
    }
    project_ids = [ANY, *projects]
    project_pick = st.sidebar.selectbox(
        "Project",
        project_ids,
        index=project_ids.index(current.project_id) if current.project_id in project_ids else 0,
        format_func=lambda v: projects.get(v, v),
        key="f_project",
    )
    return IssueFilters(
        time=time,
        start_date=start_date,
        end_date=end_date,
        cycle_id=None if cycle_pick == ANY else cycle_pick,
        state=_choice("State", options.states, current.state, key="f_state"),
        type=_choice("Type", ["bug", "feature", "chore", ALL], current.type, key="f_type"),
        assignee_id=_people_choice("Assignee", options.assignees, current.assignee_id, key="f_assignee"),
        creator_id=_people_choice("Creator", options.creators, current.creator_id, key="f_creator"),
        severity=_choice("Severity", options.severities, current.severity, key="f_severity"),
        priority=_choice("Priority", options.priorities, current.priority, key="f_priority"),
        labels=st.sidebar.multiselect(
            "Labels (any of)",
            options.labels,
            default=[lbl for lbl in current.labels or [] if lbl in options.labels],
            key="f_labels",
        )
        or None,
        project_id=None if project_pick == ANY else project_pick,
    )


def _show(title: str, chart, empty: str, theme: str | None) -> None:
    st.subheader(title)
    if chart is None:
        st.caption(empty)
    else:
        st.altair_chart(chart, use_container_width=True, theme=theme)


def _render_charts(metrics: DashboardMetrics, theme: str | None) -> None:
    left, right = st.columns(2)
    with left:
        _show("Throughput by week", charts.throughput_chart(metrics.throughput), "No completed issues.", theme)
        _show("Bugs by assignee", charts.category_chart(metrics.bugs_by_assignee), "No bugs.", theme)
        _show("Bugs by priority", charts.category_chart(metrics.bugs_by_priority), "No bugs.", theme)
    with right:
        _show(
            "Issues by state",
            charts.category_chart(metrics.issues_by_state, value_field="value", color="#1f77b4", x_title="Issues"),
            "No issues.",
            theme,
        )
        _show("Bugs by severity", charts.category_chart(metrics.bugs_by_severity), "No bugs.", theme)
        _show("Severity x priority", charts.crosstab_heatmap(metrics.severity_priority), "No bugs.", theme)


def _render_drilldown(service: IssueService, team_id: str, filters: IssueFilters, metrics: DashboardMetrics):
    st.markdown("---")
    st.subheader("Drill down")
    chart_id = st.selectbox(
        "Chart",
        list(DRILLDOWN_SOURCES),
        format_func=lambda c: DRILLDOWN_SOURCES[c][0],
    )
    _, attr, field = DRILLDOWN_SOURCES[chart_id]
    buckets = [str(row[field]) for row in getattr(metrics, attr)]
    if not buckets:
        st.caption("Nothing to drill into for this chart.")
        return
    bucket = st.selectbox("Bucket", buckets)
    issues = service.issues_for_chart(team_id, filters, chart_id, bucket)
    st.caption(f"{len(issues)} issue(s) in {bucket}.")
    render_issue_table(issues)
    st.download_button(
        "Download bucket CSV",
        data=service.export_csv(team_id, filters, chart_id, bucket).encode(SETTINGS.download_encoding),
        file_name=SETTINGS.chart_export_filename,
        mime="text/csv",
    )


def _preset_controls(store: FilterPresetStore, team_id: str, filters: IssueFilters) -> None:
    st.sidebar.subheader("Presets")
    presets = {p.id: p for p in store.list_presets()}
    if presets:
        picked = st.sidebar.selectbox(
            "Load preset",
            [ANY, *presets],
            format_func=lambda v: presets[v].name if v in presets else v,
        )
        if picked != ANY and st.sidebar.button("Apply preset"):
            st.session_state["active_filters"] = presets[picked].filters
            reset_filter_widgets()
            st.rerun()
    name = st.sidebar.text_input("Save current filters as")
    if st.sidebar.button("Save preset", disabled=not name):
        store.create_preset(name, filters, team_id=team_id)
        st.sidebar.success(f"Saved preset {name!r}.")


@register_page("Metrics Dashboard")
def metrics_dashboard_page():
    st.title("Metrics Dashboard")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    store = FilterPresetStore()
    state = store.get_app_state()

    try:
        teams = service.get_teams()
    except Exception as exc:  # pragma: no cover
        st.error(f"Failed to load teams: {exc}")
        return
    if not teams:
        st.info("No teams visible to this API key.")
        return
    team_names = {t["id"]: t.get("name") or t["id"] for t in teams}
    team_ids = list(team_names)
    team_id = st.sidebar.selectbox(
        "Team",
        team_ids,
        index=team_ids.index(state.last_team) if state.last_team in team_ids else 0,
        format_func=lambda v: team_names[v],
    )
    if st.sidebar.button("Refresh issues"):
        service.fetch_team_issues(team_id, refresh=True)

    current = st.session_state.get("active_filters") or state.filters or IssueFilters()
    # Options come from the unfiltered snapshot, so an empty selection is enough to collect them
    options, info = service.dashboard(team_id, IssueFilters())
    filters = _filter_form(options, current, service.project_choices(team_id))
    st.session_state["active_filters"] = filters
    store.save_app_state(team_id, filters)
    _preset_controls(store, team_id, filters)

    metrics, _ = service.dashboard(team_id, filters)
    st.caption(
        f"{metrics.scoped_count} of {info['count']} cached issue(s) match "
        f"(created {info['from'] or '?'} .. {info['to'] or '?'})."
    )
    _render_charts(metrics, charts.streamlit_theme(state.theme))
    st.download_button(
        "Download filtered CSV",
        data=service.export_csv(team_id, filters).encode(SETTINGS.download_encoding),
        file_name=SETTINGS.export_filename,
        mime="text/csv",
    )
    _render_drilldown(service, team_id, filters, metrics)
