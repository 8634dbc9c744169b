"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

PREFERRED_ORDER = [
    "Metrics Dashboard",  # filtered charts + drill-down
    "Prompt Chart",  # natural-language charts
    "Filter Presets",  # saved selections
    "Setup / Connection",  # configuration
]


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def ordered_pages(pages: list[str]) -> list[str]:
    ordered = [name for name in PREFERRED_ORDER if name in pages]
    trailing = sorted(name for name in pages if name not in PREFERRED_ORDER)
    return ordered + trailing


def main():
    st.sidebar.title("Linear Metrics")
    pages = ordered_pages(list(PAGES.keys()))
    if not pages:
        st.write("No pages registered yet.")
        return
    # Without a service yet, open on the setup page
    if "Setup / Connection" in pages and "issue_service" not in st.session_state:
        default = pages.index("Setup / Connection")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
