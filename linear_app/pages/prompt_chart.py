"""Prompt chart page: describe a chart in plain language and drill into it."""

from __future__ import annotations

import json

import streamlit as st

from linear_app.app import register_page
from linear_app.core.config import CHART_PROMPT, SETTINGS
from linear_app.core.models import ChartSpec, IssueFilters
from linear_app.core.presets import FilterPresetStore
from linear_app.core.service import IssueService
from linear_app.visual.charts import spec_chart, streamlit_theme
from linear_app.visual.tables import render_issue_table

EXAMPLE_PROMPTS = [
    "Bugs per week grouped by priority",
    "Average estimate by assignee for features",
    "Donut of open issues by severity",
]


@register_page("Prompt Chart")
def prompt_chart_page():
    st.title("Prompt Chart")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    generator = st.session_state.get("spec_generator")
    if generator is None:
        st.warning("Add an OpenAI API key on the Setup page to enable prompt charts.")
        return

    teams = service.get_teams()
    if not teams:
        st.info("No teams visible to this API key.")
        return
    team_names = {t["id"]: t.get("name") or t["id"] for t in teams}
    team_id = st.selectbox("Team", list(team_names), format_func=lambda v: team_names[v])
    filters: IssueFilters = st.session_state.get("active_filters") or IssueFilters()
    if not filters.is_empty():
        st.caption(f"Dashboard filters applied: {json.dumps(filters.to_dict())}")

    prompt = st.text_area("Describe the chart", placeholder=EXAMPLE_PROMPTS[0])
    with st.expander("Examples"):
        for example in EXAMPLE_PROMPTS:
            st.markdown(f"- {example}")

    if st.button("Generate", type="primary"):
        with st.spinner("Asking the model for a chart spec..."):
            try:
                spec, _ = service.chart_from_prompt(team_id, filters, prompt.strip(), generator)
            except ValueError:
                st.error("Enter a prompt first.")
                return
            except RuntimeError as exc:
                st.error(f"Chart generation failed: {exc}")
                return
        st.session_state["prompt_spec"] = spec

    spec: ChartSpec | None = st.session_state.get("prompt_spec")
    if spec is None:
        return
    payload = service.chart_from_spec(team_id, filters, spec)
    with st.expander("Chart spec"):
        st.json(spec.to_payload())
    chart = spec_chart(payload, spec)
    if chart is None:
        st.info("No issues match this chart.")
        return
    theme = streamlit_theme(FilterPresetStore().get_app_state().theme)
    st.altair_chart(chart, use_container_width=True, theme=theme)

    st.subheader("Drill down")
    bucket_key = "name" if "name" in payload.data[0] else payload.x_key
    bucket = st.selectbox("Bucket", [str(row[bucket_key]) for row in payload.data])
    series = None
    if spec.grouped and payload.group_names:
        series = st.selectbox("Series", payload.group_names)
    issues = service.issues_for_chart(team_id, filters, CHART_PROMPT, bucket, series, spec)
    st.caption(f"{len(issues)} issue(s).")
    render_issue_table(issues)
    st.download_button(
        "Download CSV",
        data=service.export_csv(team_id, filters, CHART_PROMPT, bucket, series, spec).encode(
            SETTINGS.download_encoding
        ),
        file_name=SETTINGS.chart_export_filename,
        mime="text/csv",
    )
