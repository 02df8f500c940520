"""Total coercion of arbitrary candidate data into a ResumeDocument.

Used identically by the storage load path, snapshot import and the LLM
extraction result. Never raises: any field that does not have the expected
shape degrades to that field's empty default.
"""

from collections.abc import Mapping
from typing import Any, Callable, List, Optional

from pydantic import BaseModel

from .resume import CEFR_LEVELS, DEFAULT_CEFR_LEVEL, ResumeDocument

PERSONAL_INFO_FIELDS = (
    "firstName",
    "lastName",
    "nationality",
    "phone",
    "email",
    "linkedin",
    "address",
    "aboutMe",
)
EDUCATION_FIELDS = ("startYear", "endYear", "location", "degree", "institution")
EXPERIENCE_FIELDS = ("startDate", "endDate", "location", "position", "company")


def _as_mapping(value: Any) -> Optional[Mapping]:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return value
    return None


def _coerce_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _coerce_level(value: Any) -> str:
    level = _coerce_str(value).strip().upper()
    return level if level in CEFR_LEVELS else DEFAULT_CEFR_LEVEL


def _coerce_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [_coerce_str(item) for item in value if isinstance(item, str) or _coerce_str(item)]


def _coerce_skill_set(value: Any) -> List[str]:
    skills: List[str] = []
    for skill in _coerce_str_list(value):
        if skill.strip() and skill not in skills:
            skills.append(skill)
    return skills


def _unique_id(preferred: str, fallback: str, seen: set) -> str:
    if preferred.strip() and preferred not in seen:
        return preferred
    candidate, n = fallback, 2
    while candidate in seen:
        candidate = f"{fallback}-{n}"
        n += 1
    return candidate


def _normalize_entries(value: Any, prefix: str, build: Callable[[Mapping], dict]) -> List[dict]:
    """Map list elements through build(); fallback ids are '<prefix>-<position>'."""
    if not isinstance(value, list):
        return []
    entries: List[dict] = []
    seen: set = set()
    for index, raw in enumerate(value):
        item = _as_mapping(raw)
        if item is None:
            continue
        entry_id = _unique_id(_coerce_str(item.get("id")), f"{prefix}-{index + 1}", seen)
        seen.add(entry_id)
        entries.append({"id": entry_id, **build(item)})
    return entries


def _education(item: Mapping) -> dict:
    return {name: _coerce_str(item.get(name)) for name in EDUCATION_FIELDS}


def _experience(item: Mapping) -> dict:
    entry = {name: _coerce_str(item.get(name)) for name in EXPERIENCE_FIELDS}
    entry["responsibilities"] = _coerce_str_list(item.get("responsibilities"))
    entry["currentJob"] = _coerce_bool(item.get("currentJob"))
    return entry


def _language(item: Mapping) -> dict:
    return {
        "language": _coerce_str(item.get("language")),
        "reading": _coerce_level(item.get("reading")),
        "speaking": _coerce_level(item.get("speaking")),
        "writing": _coerce_level(item.get("writing")),
    }


def _personal_info(value: Any) -> dict:
    info = _as_mapping(value) or {}
    clean = {name: _coerce_str(info.get(name)) for name in PERSONAL_INFO_FIELDS}
    photo = info.get("profilePhoto")
    clean["profilePhoto"] = photo if isinstance(photo, str) and photo.strip() else None
    return clean


def normalize(candidate: Any) -> ResumeDocument:
    """Coerce any candidate (None, wrong types, partial dicts, models) into a valid document.

    Idempotent: normalize(normalize(x).to_dict()) == normalize(x).
    """
    data = _as_mapping(candidate) or {}
    return ResumeDocument.model_validate(
        {
            "personalInfo": _personal_info(data.get("personalInfo")),
            "education": _normalize_entries(data.get("education"), "edu", _education),
            "experience": _normalize_entries(data.get("experience"), "exp", _experience),
            "motherTongue": _coerce_str(data.get("motherTongue")),
            "languages": _normalize_entries(data.get("languages"), "lang", _language),
            "medicalSkills": _coerce_skill_set(data.get("medicalSkills")),
            "hobbies": _coerce_str(data.get("hobbies")),
        }
    )
