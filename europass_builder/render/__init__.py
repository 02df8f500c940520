"""Rendering/export: Europass sections and PDF output."""

from .pdf_renderer import EuropassPdfRenderer, pdf_filename, render_pdf
from .sections import Section, SectionEntry, build_sections, contact_items, full_name

__all__ = [
    "build_sections",
    "contact_items",
    "full_name",
    "Section",
    "SectionEntry",
    "EuropassPdfRenderer",
    "render_pdf",
    "pdf_filename",
]
