"""Connection setup page: collect API keys and initialize IssueService."""

from __future__ import annotations

import streamlit as st

from linear_app.app import register_page
from linear_app.core.cache import TimedCache
from linear_app.core.config import CHART_THEMES, DEFAULT_CHART_THEME, ISSUE_CACHE_TTL_SECONDS
from linear_app.core.linear_client import LinearAPI
from linear_app.core.presets import FilterPresetStore
from linear_app.core.prompt_client import ChartSpecGenerator
from linear_app.core.secrets import read_secret
from linear_app.core.service import IssueService


@register_page("Setup / Connection")
def setup_page():
    st.title("Linear Connection Setup")
    st.caption("Enter API keys (use secrets manager in production).")

    linear_key = st.text_input(
        "Linear API key",
        type="password",
        value=read_secret("LINEAR_API_KEY") or "",
    )
    openai_key = st.text_input(
        "OpenAI API key (optional, enables Prompt Chart)",
        type="password",
        value=read_secret("OPENAI_API_KEY", section="openai") or "",
    )
    ttl = st.number_input(
        "Issue cache TTL (seconds)",
        min_value=60,
        max_value=6 * 3600,
        value=int(ISSUE_CACHE_TTL_SECONDS),
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not linear_key:
            st.error("Linear API key required.")
            return
        try:
            api = LinearAPI(linear_key)
            if not api.validate():
                st.error("Linear rejected the API key.")
                return
            st.session_state["issue_service"] = IssueService(api, cache=TimedCache(ttl=float(ttl)))
            if openai_key:
                st.session_state["spec_generator"] = ChartSpecGenerator(openai_key)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Linear client: {e}")

    if "issue_service" in st.session_state:
        st.info("IssueService ready.")
    if "spec_generator" in st.session_state:
        st.info("Prompt charts enabled.")

    st.subheader("Display")
    store = FilterPresetStore()
    saved = store.get_app_state().theme or DEFAULT_CHART_THEME
    theme = st.radio(
        "Chart theme",
        list(CHART_THEMES),
        index=list(CHART_THEMES).index(saved) if saved in CHART_THEMES else 0,
        horizontal=True,
    )
    if theme != saved:
        store.save_theme(theme)
