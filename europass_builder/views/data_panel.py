"""Sidebar: autosave status, JSON export/import, clear all."""

import streamlit as st

from europass_builder.errors import ResumeImportError
from europass_builder.state import ResumeController
from europass_builder.utils.helpers import format_last_saved


def render_data_panel(controller: ResumeController) -> None:
    with st.sidebar:
        st.header("Data")
        st.caption(f"Last saved: {format_last_saved(controller.last_saved_at)}")

        st.download_button(
            "Export Data",
            data=controller.export_json().encode("utf-8"),
            file_name=controller.snapshot_filename(),
            mime="application/json",
            key="export-json",
        )

        upload = st.file_uploader("Import Data", type=["json"], key="import-json")
        if upload is not None and st.button("Import", disabled=controller.busy, key="import-apply"):
            with controller.operation():
                try:
                    controller.import_snapshot(upload.getvalue())
                    st.session_state["flash"] = ("success", "Your resume data has been imported.")
                    st.rerun()
                except ResumeImportError as e:
                    st.error(str(e))

        st.divider()
        confirm = st.checkbox("I understand this cannot be undone", key="clear-confirm")
        if st.button("Clear All Data", disabled=not confirm, key="clear-all"):
            controller.clear()
            st.session_state["step"] = 1
            st.session_state["flash"] = ("info", "All resume data has been cleared.")
            st.rerun()
