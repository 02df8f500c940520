"""Streamlit views for the wizard, the data panel and the preview."""

from .data_panel import render_data_panel
from .forms import (
    render_education_form,
    render_experience_form,
    render_personal_info_form,
    render_skills_languages_form,
)
from .preview import render_preview

__all__ = [
    "render_data_panel",
    "render_personal_info_form",
    "render_education_form",
    "render_experience_form",
    "render_skills_languages_form",
    "render_preview",
]
