from __future__ import annotations

import asyncio
import json
from typing import Callable

import httpx
import pytest

from europass_builder.cv_pipeline import extract_resume_document, run_resume_pipeline
from europass_builder.cv_pipeline import resume_extractor
from europass_builder.errors import ExtractionError, UnsupportedFileTypeError
from europass_builder.schemas import ResumeDocument
from europass_builder.state import ResumeController

RESUME_TEXT = "Ada Lovelace\nICU Nurse at St Thomas' Hospital, London, 2019 - present\nada@example.org"


def _completion(content: str) -> dict:
    return {
        "id": "cmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "sonar-pro",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _extract(handler: Callable[[httpx.Request], httpx.Response], text: str = RESUME_TEXT) -> ResumeDocument:
    async def run() -> ResumeDocument:
        async with resume_extractor.create_client("test-key", transport=httpx.MockTransport(handler)) as client:
            return await extract_resume_document(client, text, "ada.txt")

    return asyncio.run(run())


def test_extracts_document_from_completion() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        content = json.dumps(
            {
                "personalInfo": {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.org"},
                "experience": [{"position": "ICU Nurse", "currentJob": True}],
            }
        )
        return httpx.Response(200, json=_completion(content))

    doc = _extract(handler)

    assert doc.personal_info.first_name == "Ada"
    assert doc.experience[0].id == "exp-1"
    assert doc.experience[0].current_job is True

    body = seen[0]
    assert body["model"] == resume_extractor.MODEL_NAME
    assert body["messages"][0]["role"] == "system"
    for field_name in ("personalInfo", "education", "experience", "motherTongue", "languages", "medicalSkills", "hobbies"):
        assert field_name in body["messages"][0]["content"]
    assert "ada.txt" in body["messages"][1]["content"]
    assert RESUME_TEXT in body["messages"][1]["content"]


def test_recovers_json_wrapped_in_prose() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion('Sure! ```json\n{"hobbies": "Chess"}\n``` Hope this helps.'))

    assert _extract(handler).hobbies == "Chess"


def test_truncates_long_resume_text(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(resume_extractor, "MAX_EXTRACTION_CHARS", 20)
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=_completion("{}"))

    _extract(handler, text="x" * 50)

    assert "x" * 20 in seen[0]["messages"][1]["content"]
    assert "x" * 21 not in seen[0]["messages"][1]["content"]


@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
def test_upstream_error_status_becomes_extraction_error(status: int) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(status, json={"error": {"message": "upstream said no"}})

    with pytest.raises(ExtractionError, match=str(status)):
        _extract(handler)
    assert len(calls) == 1  # no automatic retries


def test_network_failure_becomes_extraction_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExtractionError, match="Could not reach"):
        _extract(handler)


@pytest.mark.parametrize("content", ["I am unable to parse this resume.", ""])
def test_unusable_content_becomes_extraction_error(content: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(content))

    with pytest.raises(ExtractionError):
        _extract(handler)


def test_empty_resume_text_fails_before_network() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ExtractionError, match="File content is required"):
        _extract(handler, text="   ")


def test_failed_extraction_leaves_document_untouched(controller: ResumeController) -> None:
    """Keep-previous-state policy: the controller only changes when a result is adopted."""
    controller.update(hobbies="Chess")
    before = controller.document

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("no json here"))

    with controller.operation() as token:
        with pytest.raises(ExtractionError):
            _extract(handler)

    assert controller.document == before
    assert controller.generation == token


def test_pipeline_rejects_unsupported_file_before_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args: object, **kwargs: object) -> None:
        raise AssertionError("no client expected")

    monkeypatch.setattr(resume_extractor, "create_client", fail)

    with pytest.raises(UnsupportedFileTypeError):
        run_resume_pipeline(b"\x89PNG", "photo.png", "image/png", api_key="test-key")


def test_pipeline_requires_api_key() -> None:
    with pytest.raises(ExtractionError, match="PERPLEXITY_API_KEY"):
        run_resume_pipeline(RESUME_TEXT.encode(), "ada.txt", "text/plain", api_key="")


def test_pipeline_end_to_end_with_text_file(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion('{"personalInfo": {"firstName": "Ada"}}'))

    real_create_client = resume_extractor.create_client
    monkeypatch.setattr(
        resume_extractor,
        "create_client",
        lambda api_key: real_create_client(api_key, transport=httpx.MockTransport(handler)),
    )

    doc = run_resume_pipeline(RESUME_TEXT.encode(), "ada.txt", None, api_key="test-key")

    assert doc.personal_info.first_name == "Ada"
