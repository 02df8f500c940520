"""Résumé preview and PDF download."""

from typing import MutableMapping, Optional
from xml.sax.saxutils import escape

import streamlit as st

from europass_builder.errors import RenderError
from europass_builder.render import build_sections, contact_items, full_name, pdf_filename, render_pdf
from europass_builder.schemas import ResumeDocument
from europass_builder.state import ResumeController
from europass_builder.utils.helpers import decode_data_uri


PDF_CACHE_KEY = "pdf-export"


def store_pdf(cache: MutableMapping, document: ResumeDocument, pdf: bytes) -> None:
    """Remember the PDF together with the fingerprint of the document it was rendered from."""
    cache[PDF_CACHE_KEY] = (document.fingerprint(), pdf)


def cached_pdf(cache: MutableMapping, document: ResumeDocument) -> Optional[bytes]:
    """The cached PDF if it still matches document; a stale one is dropped."""
    entry = cache.get(PDF_CACHE_KEY)
    if not entry:
        return None
    fingerprint, pdf = entry
    if fingerprint != document.fingerprint():
        cache.pop(PDF_CACHE_KEY, None)
        return None
    return pdf


def render_preview(controller: ResumeController) -> None:
    document = controller.document
    info = document.personal_info

    col_a, col_b = st.columns([1, 3])
    with col_a:
        photo = decode_data_uri(info.profile_photo or "")
        if photo:
            st.image(photo[1], width=140)
        for label, value in contact_items(info):
            st.caption(f"**{label}:** {escape(value)}")
    with col_b:
        st.markdown(f"## {escape(full_name(info)) or 'Your name'}")
        for section in build_sections(document):
            st.markdown(f"#### {section.title}")
            if section.text:
                st.markdown(escape(section.text))
            for entry in section.entries:
                if entry.period:
                    st.caption(entry.period)
                if entry.heading:
                    st.markdown(f"**{escape(entry.heading)}**")
                if entry.detail:
                    st.markdown(f"*{escape(entry.detail)}*")
                for bullet in entry.bullets:
                    st.markdown(f"- {escape(bullet)}")
            if section.items:
                st.markdown(" ".join(f"`{item}`" for item in section.items))

    st.divider()
    if st.button("Generate PDF", type="primary", disabled=controller.busy, key="pdf-generate"):
        with controller.operation(), st.spinner("Generating PDF…"):
            try:
                store_pdf(st.session_state, controller.document, render_pdf(controller.document))
            except RenderError as e:
                st.session_state.pop(PDF_CACHE_KEY, None)
                st.error(str(e))
    pdf = cached_pdf(st.session_state, controller.document)
    if pdf:
        st.download_button(
            "Download PDF",
            data=pdf,
            file_name=pdf_filename(controller.document),
            mime="application/pdf",
            key="pdf-download",
        )
