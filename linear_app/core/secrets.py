"""Resolve API keys from Streamlit secrets with an environment fallback."""

from __future__ import annotations

import os

import streamlit as st


def read_secret(name: str, section: str = "linear") -> str | None:
    """Look up ``name`` in ``st.secrets[section]``, then top-level secrets, then the environment."""
    try:
        scoped = st.secrets.get(section, {})
        value = scoped.get(name) or st.secrets.get(name)
    except FileNotFoundError:
        # No secrets.toml configured
        value = None
    return value or os.environ.get(name) or None
