"""Schema exports."""

from .normalize import normalize
from .resume import (
    CEFR_LEVEL_LABELS,
    CEFR_LEVELS,
    DEFAULT_CEFR_LEVEL,
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    PersonalInfo,
    ResumeDocument,
    new_entry_id,
)

__all__ = [
    "normalize",
    "ResumeDocument",
    "PersonalInfo",
    "EducationEntry",
    "ExperienceEntry",
    "LanguageEntry",
    "CEFR_LEVELS",
    "CEFR_LEVEL_LABELS",
    "DEFAULT_CEFR_LEVEL",
    "new_entry_id",
]
