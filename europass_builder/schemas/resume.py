"""Canonical résumé document (Europass layout) shared by every component."""

import hashlib
import json
import time
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CEFRLevel = Literal["A1", "A2", "B1", "B2", "C1", "C2"]
CEFR_LEVELS: tuple = ("A1", "A2", "B1", "B2", "C1", "C2")
DEFAULT_CEFR_LEVEL: str = "B2"
CEFR_LEVEL_LABELS: dict = {
    "A1": "A1 - Basic",
    "A2": "A2 - Elementary",
    "B1": "B1 - Intermediate",
    "B2": "B2 - Upper Intermediate",
    "C1": "C1 - Advanced",
    "C2": "C2 - Proficient",
}

_last_entry_id = 0


def new_entry_id() -> str:
    """Timestamp-based id for entries created in the editor; never repeats within a process."""
    global _last_entry_id
    candidate = int(time.time() * 1000)
    if candidate <= _last_entry_id:
        candidate = _last_entry_id + 1
    _last_entry_id = candidate
    return str(candidate)


class ResumeModel(BaseModel):
    """snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PersonalInfo(ResumeModel):
    first_name: str = Field(default="", description="Given name")
    last_name: str = Field(default="", description="Family name")
    nationality: str = Field(default="")
    phone: str = Field(default="")
    email: str = Field(default="", description="Contact email; required to pass the personal-info step")
    linkedin: str = Field(default="", description="LinkedIn URL or handle")
    address: str = Field(default="")
    about_me: str = Field(default="", description="Short free-text summary")
    profile_photo: Optional[str] = Field(default=None, description="Photo as a data URI")


class EducationEntry(ResumeModel):
    id: str = Field(..., description="Unique among education entries")
    start_year: str = Field(default="")
    end_year: str = Field(default="")
    location: str = Field(default="")
    degree: str = Field(default="")
    institution: str = Field(default="")


class ExperienceEntry(ResumeModel):
    id: str = Field(..., description="Unique among experience entries")
    start_date: str = Field(default="")
    end_date: str = Field(default="", description="Empty while current_job is set")
    location: str = Field(default="")
    position: str = Field(default="")
    company: str = Field(default="")
    responsibilities: List[str] = Field(default_factory=list)
    current_job: bool = Field(default=False)


class LanguageEntry(ResumeModel):
    id: str = Field(..., description="Unique among language entries")
    language: str = Field(default="")
    reading: CEFRLevel = Field(default=DEFAULT_CEFR_LEVEL)
    speaking: CEFRLevel = Field(default=DEFAULT_CEFR_LEVEL)
    writing: CEFRLevel = Field(default=DEFAULT_CEFR_LEVEL)


class ResumeDocument(ResumeModel):
    """Root aggregate; one per session, owned by the state controller."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    mother_tongue: str = Field(default="")
    languages: List[LanguageEntry] = Field(default_factory=list)
    medical_skills: List[str] = Field(default_factory=list, description="Flat, de-duplicated skill list")
    hobbies: str = Field(default="", description="Comma-separated; split only when rendering")

    def to_dict(self) -> dict:
        """JSON-ready dict in the persisted/exported (camelCase) shape."""
        return self.model_dump(by_alias=True, mode="json")

    def fingerprint(self) -> str:
        """Content hash; changes whenever any field changes."""
        payload = json.dumps(self.to_dict(), sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()
