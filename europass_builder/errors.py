"""Error kinds surfaced by the core. The Streamlit shell turns them into notifications."""

from typing import Optional


class ResumeBuilderError(Exception):
    """Base class for every user-facing failure of the builder."""


class StorageCorruptError(ResumeBuilderError):
    """Persisted document could not be parsed; recovered by discarding it."""


class ResumeImportError(ResumeBuilderError):
    """Uploaded snapshot is not a JSON object. Current document is left untouched."""


class ExtractionError(ResumeBuilderError):
    """Upstream extraction failed or returned content with no usable JSON object."""

    def __init__(self, message: str, upstream_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.upstream_message = upstream_message

    def __str__(self) -> str:
        base = super().__str__()
        if self.upstream_message:
            return f"{base}: {self.upstream_message}"
        return base


class UnsupportedFileTypeError(ResumeBuilderError):
    """Upload rejected before any network call."""


class RenderError(ResumeBuilderError):
    """PDF export failed; no file was produced."""
