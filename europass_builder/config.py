"""Configuration loaded from environment variables."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def env_number(name: str, default, cast):
    """Numeric setting from the environment; a malformed value falls back to default with a warning."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        # get_logger depends on this module, so use plain logging here
        logging.getLogger(__name__).warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


# Completion API (OpenAI-compatible endpoint) – never hardcode keys
PERPLEXITY_API_KEY: str = os.getenv("PERPLEXITY_API_KEY", "")
LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.perplexity.ai")
MODEL_NAME: str = os.getenv("MODEL_NAME", "sonar-pro")
LLM_MAX_TOKENS: int = env_number("LLM_MAX_TOKENS", 4000, int)
LLM_TEMPERATURE: float = env_number("LLM_TEMPERATURE", 0.1, float)

# HTTP settings
HTTP_TIMEOUT_SECONDS: float = env_number("HTTP_TIMEOUT_SECONDS", 60.0, float)

# Resume text sent upstream is cut to this many characters
MAX_EXTRACTION_CHARS: int = 12000

# Local persistence
STORAGE_DIR: Path = Path(os.getenv("STORAGE_DIR", "~/.europass_builder")).expanduser()
STORAGE_DOCUMENT_KEY: str = "document"
STORAGE_SAVED_AT_KEY: str = "document-saved-at"

# Snapshot (import/export) metadata
SNAPSHOT_VERSION: str = "1.0"
SNAPSHOT_METADATA_KEYS: tuple = ("exportedAt", "version")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Wizard steps, in order; only step 1 has a completion gate
WIZARD_STEPS: list = [
    "Personal Info",
    "Education",
    "Experience",
    "Skills & Languages",
    "Preview",
]

# Upload types accepted by the extraction flow (MIME type or extension fallback)
ALLOWED_UPLOAD_MIME_TYPES: dict = {
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/msword": ".doc",
    "text/plain": ".txt",
}
ALLOWED_UPLOAD_EXTENSIONS: tuple = (".pdf", ".docx", ".doc", ".txt")

DEFAULT_PDF_FILENAME: str = "Europass_Resume.pdf"

# Predefined checklist offered on the skills step; custom skills can be added too
MEDICAL_SKILL_GROUPS: dict = {
    "Clinical Skills": [
        "Patient Assessment",
        "Vital Signs Monitoring",
        "CPR & BLS",
        "ACLS",
        "IV Therapy",
        "Medication Administration",
        "Wound Care",
        "Infection Control",
    ],
    "Technical Skills": [
        "EMR/EHR Systems",
        "Medical Equipment",
        "Telemetry Monitoring",
        "Ventilator Management",
        "Laboratory Tests",
        "Patient Documentation",
    ],
    "Specialized Care": [
        "ICU/Critical Care",
        "Emergency Care",
        "Pediatric Care",
        "Geriatric Care",
        "Surgical Care",
        "Rehabilitation",
    ],
}
