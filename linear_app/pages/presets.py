"""Filter presets page: list, rename, apply and delete saved selections."""

from __future__ import annotations

import streamlit as st

from linear_app.app import register_page
from linear_app.core.models import IssueFilters
from linear_app.core.presets import FilterPresetStore
from linear_app.pages.metrics_dashboard import reset_filter_widgets


@register_page("Filter Presets")
def presets_page():
    st.title("Filter Presets")
    store = FilterPresetStore()
    active: IssueFilters | None = st.session_state.get("active_filters")

    st.subheader("Save current selection")
    if active is None or active.is_empty():
        st.caption("No dashboard filters selected yet.")
    else:
        st.json(active.to_dict())
        name = st.text_input("Preset name")
        if st.button("Save preset", type="primary", disabled=not name):
            store.create_preset(name, active, team_id=store.get_app_state().last_team)
            st.success(f"Saved preset {name!r}.")

    st.subheader("Saved presets")
    presets = store.list_presets()
    if not presets:
        st.info("No presets saved.")
        return
    for preset in presets:
        with st.expander(f"{preset.name} ({preset.created_at[:10]})"):
            st.json(preset.filters.to_dict())
            new_name = st.text_input("Name", value=preset.name, key=f"name_{preset.id}")
            apply_col, rename_col, delete_col = st.columns(3)
            if apply_col.button("Apply", key=f"apply_{preset.id}"):
                st.session_state["active_filters"] = preset.filters
                reset_filter_widgets()
                st.success("Preset applied; open the Metrics Dashboard.")
            if rename_col.button("Rename", key=f"rename_{preset.id}", disabled=not new_name):
                store.update_preset(preset.id, new_name, preset.filters, preset.team_id)
                st.rerun()
            if delete_col.button("Delete", key=f"delete_{preset.id}"):
                store.delete_preset(preset.id)
                st.rerun()
