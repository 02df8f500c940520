from __future__ import annotations

from europass_builder.schemas import ResumeDocument
from europass_builder.state import ResumeController
from europass_builder.views.preview import PDF_CACHE_KEY, cached_pdf, store_pdf


def test_fingerprint_tracks_content() -> None:
    doc = ResumeDocument()
    edited = doc.model_copy(update={"hobbies": "Chess"})

    assert doc.fingerprint() == ResumeDocument().fingerprint()
    assert doc.fingerprint() != edited.fingerprint()


def test_cached_pdf_served_while_document_unchanged(controller: ResumeController) -> None:
    cache: dict = {}
    store_pdf(cache, controller.document, b"%PDF-first")

    assert cached_pdf(cache, controller.document) == b"%PDF-first"


def test_field_edit_invalidates_cached_pdf(controller: ResumeController) -> None:
    """A PDF rendered before an edit is never offered for the edited résumé."""
    cache: dict = {}
    controller.update_personal_info(first_name="Ada")
    store_pdf(cache, controller.document, b"%PDF-first")
    generation = controller.generation

    controller.update_personal_info(first_name="Grace")

    assert controller.generation == generation
    assert cached_pdf(cache, controller.document) is None
    assert PDF_CACHE_KEY not in cache


def test_empty_cache() -> None:
    assert cached_pdf({}, ResumeDocument()) is None
