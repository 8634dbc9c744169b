"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``linear_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from linear_app.app import main
from linear_app.core.secrets import read_secret

st.set_page_config(layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("linear_app")


def _auto_init_issue_service():
    """Initialize the Linear service from secrets or environment if available."""
    if "issue_service" in st.session_state:
        return

    linear_key = read_secret("LINEAR_API_KEY")
    openai_key = read_secret("OPENAI_API_KEY", section="openai")

    if linear_key:
        try:
            from linear_app.core.linear_client import LinearAPI
            from linear_app.core.service import IssueService

            api = LinearAPI(linear_key)
            if not api.validate():
                st.sidebar.error("Linear API key was rejected. Please use the Setup page.")
                return
            st.session_state["issue_service"] = IssueService(api)
            st.sidebar.success("Linear connection successful!")
        except Exception as e:
            st.sidebar.error(f"Linear connection failed: {e}")
            st.session_state.pop("issue_service", None)
    else:
        st.sidebar.warning("LINEAR_API_KEY not found. Please use the Setup page.")

    if openai_key and "spec_generator" not in st.session_state:
        from linear_app.core.prompt_client import ChartSpecGenerator

        st.session_state["spec_generator"] = ChartSpecGenerator(openai_key)


_auto_init_issue_service()

PAGES_DIR = Path(__file__).parent / "linear_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"linear_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception:  # pragma: no cover
        logger.exception("Failed importing page %s", mod_name)

if __name__ == "__main__":
    main()
