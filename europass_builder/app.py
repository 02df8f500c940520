"""
Europass Résumé Builder – Streamlit frontend.
No business logic in layout; state lives in ResumeController, extraction in cv_pipeline.
"""

from typing import Optional

import streamlit as st

from europass_builder.config import ALLOWED_UPLOAD_EXTENSIONS, PERPLEXITY_API_KEY, STORAGE_DIR, WIZARD_STEPS
from europass_builder.cv_pipeline import ensure_supported_upload, run_resume_pipeline
from europass_builder.errors import ExtractionError, UnsupportedFileTypeError
from europass_builder.state import ResumeController, open_default_store
from europass_builder.utils.logger import get_logger
from europass_builder.views import (
    render_data_panel,
    render_education_form,
    render_experience_form,
    render_personal_info_form,
    render_preview,
    render_skills_languages_form,
)

logger = get_logger(__name__)

MODE_MANUAL = "manual"
MODE_AI = "ai"
STEP_RENDERERS = {
    1: render_personal_info_form,
    2: render_education_form,
    3: render_experience_form,
    4: render_skills_languages_form,
    5: render_preview,
}
UPLOAD_TYPES = [ext.lstrip(".") for ext in ALLOWED_UPLOAD_EXTENSIONS]


def _get_controller() -> ResumeController:
    """One controller per browser session, loaded from local storage on first use."""
    if "controller" not in st.session_state:
        controller = ResumeController(open_default_store(STORAGE_DIR))
        controller.load()
        st.session_state["controller"] = controller
    return st.session_state["controller"]


def _show_flash() -> None:
    flash: Optional[tuple] = st.session_state.pop("flash", None)
    if not flash:
        return
    kind, message = flash
    if kind == "success":
        st.success(message)
    elif kind == "error":
        st.error(message)
    else:
        st.info(message)


def _render_landing() -> None:
    st.markdown("*Create a professional Europass résumé step by step, or let AI fill it in from your existing CV.*")
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Build manually")
        st.write("Fill in a guided form: personal details, education, experience, skills and languages.")
        if st.button("Start building", type="primary", key="mode-manual"):
            st.session_state["mode"] = MODE_MANUAL
            st.session_state["step"] = 1
            st.rerun()
    with col2:
        st.subheader("Upload with AI")
        st.write("Upload a PDF, DOCX or TXT résumé and review the extracted fields before exporting.")
        if st.button("Upload résumé", key="mode-ai"):
            st.session_state["mode"] = MODE_AI
            st.rerun()


def _render_upload(controller: ResumeController) -> None:
    st.subheader("Upload your résumé")
    if not PERPLEXITY_API_KEY:
        st.warning("PERPLEXITY_API_KEY is not set. Add it to your .env file to enable AI extraction.")
    uploaded = st.file_uploader("Select Resume File", type=UPLOAD_TYPES, key="resume-upload")
    extract_clicked = st.button(
        "Extract with AI",
        type="primary",
        disabled=uploaded is None or controller.busy,
        key="resume-extract",
    )
    if st.button("Back", key="upload-back"):
        st.session_state["mode"] = None
        st.rerun()

    if not (extract_clicked and uploaded is not None):
        return
    try:
        ensure_supported_upload(uploaded.name, uploaded.type)
    except UnsupportedFileTypeError as e:
        st.error(str(e))
        return

    # Previous document is kept on failure
    with controller.operation() as token, st.spinner("Extracting résumé data…"):
        try:
            document = run_resume_pipeline(uploaded.getvalue(), uploaded.name, uploaded.type)
        except (UnsupportedFileTypeError, ExtractionError) as e:
            logger.warning("Extraction failed for %s: %s", uploaded.name, e)
            st.error(str(e))
            return
    if controller.adopt(document, token):
        st.session_state["mode"] = MODE_MANUAL
        st.session_state["step"] = 1
        st.session_state["flash"] = ("success", "Résumé data extracted. Review each step before exporting.")
    else:
        st.session_state["flash"] = ("info", "Your résumé changed while extracting; the extracted data was discarded.")
    st.rerun()


def _render_step_nav(controller: ResumeController, step: int) -> None:
    cols = st.columns(len(WIZARD_STEPS))
    for index, title in enumerate(WIZARD_STEPS, start=1):
        marker = "✓ " if index < step else ""
        clickable = index <= step or (index == step + 1 and controller.validate_gate(step))
        with cols[index - 1]:
            if st.button(
                f"{marker}{index}. {title}",
                type="primary" if index == step else "secondary",
                disabled=not clickable,
                key=f"step-nav-{index}",
            ):
                st.session_state["step"] = index
                st.rerun()


def _render_wizard(controller: ResumeController) -> None:
    step: int = st.session_state.get("step", 1)
    _render_step_nav(controller, step)
    st.divider()

    STEP_RENDERERS[step](controller)

    st.divider()
    col_prev, col_next = st.columns(2)
    with col_prev:
        if step > 1 and st.button("Previous", key="step-prev"):
            st.session_state["step"] = step - 1
            st.rerun()
    with col_next:
        if step < len(WIZARD_STEPS):
            gate_ok = controller.validate_gate(step)
            if st.button("Next", type="primary", disabled=not gate_ok, key="step-next"):
                st.session_state["step"] = step + 1
                st.rerun()
            if not gate_ok:
                st.caption("First name, last name and email are required.")


def render_layout() -> None:
    """Streamlit page layout; state changes go through the controller."""
    st.set_page_config(page_title="Europass Résumé Builder", layout="wide")
    st.title("Europass Résumé Builder")

    controller = _get_controller()
    if "mode" not in st.session_state:
        st.session_state["mode"] = None
    if "step" not in st.session_state:
        st.session_state["step"] = 1

    render_data_panel(controller)
    _show_flash()

    mode = st.session_state["mode"]
    if mode is None:
        _render_landing()
    elif mode == MODE_AI:
        _render_upload(controller)
    else:
        _render_wizard(controller)


if __name__ == "__main__":
    render_layout()
