"""Single source of truth for the résumé being edited in a session.

The controller owns the live ResumeDocument, mediates every read and write,
autosaves after each mutation and is the only component that touches the
persistence boundary. The Streamlit shell keeps one instance per session.
"""

import json
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel

from europass_builder.config import (
    SNAPSHOT_METADATA_KEYS,
    SNAPSHOT_VERSION,
    STORAGE_DOCUMENT_KEY,
    STORAGE_SAVED_AT_KEY,
)
from europass_builder.errors import ResumeImportError, StorageCorruptError
from europass_builder.schemas import (
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    PersonalInfo,
    ResumeDocument,
    new_entry_id,
    normalize,
)
from europass_builder.state.storage import KeyValueStore
from europass_builder.utils.logger import get_logger

logger = get_logger(__name__)

# Accept both attribute names (first_name) and wire names (firstName) in update()
_DOCUMENT_FIELDS = {name: info.alias or name for name, info in ResumeDocument.model_fields.items()}
_WIRE_NAMES = set(_DOCUMENT_FIELDS.values())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unreadable saved-at timestamp: %r", raw)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _checked_fields(model: type, fields: Mapping[str, Any]) -> dict:
    unknown = [name for name in fields if name not in model.model_fields]
    if unknown:
        raise ValueError(f"Unknown {model.__name__} field(s): {', '.join(sorted(unknown))}")
    return dict(fields)


class ResumeController:
    """Load / update / persist / clear / import / export for one ResumeDocument."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = _utcnow) -> None:
        self._store = store
        self._clock = clock
        self._document = ResumeDocument()
        self._last_saved_at: Optional[datetime] = None
        self._busy = False
        self._generation = 0

    @property
    def document(self) -> ResumeDocument:
        return self._document

    @property
    def last_saved_at(self) -> Optional[datetime]:
        return self._last_saved_at

    @property
    def busy(self) -> bool:
        """True while an extraction, import or export is in flight; callers disable inputs."""
        return self._busy

    @property
    def generation(self) -> int:
        """Bumped on every wholesale replacement of the document."""
        return self._generation

    def _replace(self, document: ResumeDocument) -> None:
        self._document = document
        self._generation += 1

    # ----- persistence -----

    def _read_persisted(self) -> Optional[ResumeDocument]:
        try:
            raw = self._store.get(STORAGE_DOCUMENT_KEY)
        except UnicodeDecodeError as e:
            raise StorageCorruptError(f"Persisted document is not valid UTF-8: {e}") from e
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise StorageCorruptError(f"Persisted document is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StorageCorruptError("Persisted document is not a JSON object")
        return normalize(data)

    def _read_saved_at(self) -> Optional[datetime]:
        try:
            return _parse_timestamp(self._store.get(STORAGE_SAVED_AT_KEY))
        except UnicodeDecodeError:
            logger.warning("Ignoring unreadable saved-at timestamp")
            return None

    def _discard_persisted(self) -> None:
        try:
            self._store.delete(STORAGE_DOCUMENT_KEY)
            self._store.delete(STORAGE_SAVED_AT_KEY)
        except OSError as e:
            logger.error("Could not remove persisted resume state: %s", e)

    def load(self) -> ResumeDocument:
        """Adopt the persisted document (normalized) or fall back to defaults. Never persists."""
        saved_at: Optional[datetime] = None
        try:
            document = self._read_persisted()
            if document is not None:
                saved_at = self._read_saved_at()
        except StorageCorruptError as e:
            logger.warning("Discarding corrupted resume state: %s", e)
            self._discard_persisted()
            document = None
        except OSError as e:
            logger.error("Could not read persisted resume state: %s", e)
            document = None

        self._replace(document if document is not None else ResumeDocument())
        self._last_saved_at = saved_at
        if document is not None:
            logger.info("Loaded saved resume (saved at %s)", saved_at.isoformat() if saved_at else "unknown")
        return self._document

    def persist(self) -> bool:
        """Write document + timestamp. Failures are logged, never raised; memory state is kept."""
        now = self._clock()
        try:
            self._store.set(STORAGE_DOCUMENT_KEY, json.dumps(self._document.to_dict(), ensure_ascii=False))
            self._store.set(STORAGE_SAVED_AT_KEY, now.isoformat())
        except OSError as e:
            logger.error("Could not save resume; continuing with unsaved changes: %s", e)
            return False
        self._last_saved_at = now
        return True

    def clear(self) -> ResumeDocument:
        """Reset to the empty document and drop persisted state. No undo."""
        self._replace(ResumeDocument())
        self._discard_persisted()
        self._last_saved_at = None
        logger.info("Resume data cleared")
        return self._document

    # ----- mutation -----

    def update(self, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> ResumeDocument:
        """Shallow-merge top-level fields into the document, then autosave.

        A list or personalInfo value replaces the previous one as a whole.
        """
        changes = {**(partial or {}), **fields}
        wire: dict = {}
        for name, value in changes.items():
            if name in _DOCUMENT_FIELDS:
                wire[_DOCUMENT_FIELDS[name]] = value
            elif name in _WIRE_NAMES:
                wire[name] = value
            else:
                raise ValueError(f"Unknown resume field: {name}")
        self._document = normalize({**self._document.to_dict(), **wire})
        self.persist()
        return self._document

    def adopt(self, document: Union[ResumeDocument, Mapping[str, Any]], token: int) -> bool:
        """Replace the document with an async result issued under `token`.

        Returns False and leaves state alone if the document was replaced since.
        """
        if token != self._generation:
            logger.warning(
                "Discarding stale result (issued for generation %s, current %s)", token, self._generation
            )
            return False
        self._replace(normalize(document))
        self.persist()
        logger.info("Adopted extracted resume for %s", self._document.personal_info.first_name or "<unnamed>")
        return True

    @contextmanager
    def operation(self) -> Iterator[int]:
        """Mark the controller busy for one async operation; yields the generation token."""
        self._busy = True
        try:
            yield self._generation
        finally:
            self._busy = False

    def update_personal_info(self, **fields: Any) -> PersonalInfo:
        info = self._document.personal_info.model_copy(update=_checked_fields(PersonalInfo, fields))
        return self.update(personal_info=info).personal_info

    def _edit_entry(self, field: str, model: type, entry_id: str, fields: Mapping[str, Any]) -> None:
        changes = _checked_fields(model, fields)
        entries: List[BaseModel] = getattr(self._document, field)
        if not any(e.id == entry_id for e in entries):
            raise KeyError(f"No {field} entry with id {entry_id}")
        self.update({field: [e.model_copy(update=changes) if e.id == entry_id else e for e in entries]})

    def _remove_entry(self, field: str, entry_id: str) -> None:
        self.update({field: [e for e in getattr(self._document, field) if e.id != entry_id]})

    def add_education(self) -> EducationEntry:
        entry = EducationEntry(id=new_entry_id())
        self.update(education=[*self._document.education, entry])
        return entry

    def update_education(self, entry_id: str, **fields: Any) -> None:
        self._edit_entry("education", EducationEntry, entry_id, fields)

    def remove_education(self, entry_id: str) -> None:
        self._remove_entry("education", entry_id)

    def add_experience(self) -> ExperienceEntry:
        entry = ExperienceEntry(id=new_entry_id())
        self.update(experience=[*self._document.experience, entry])
        return entry

    def update_experience(self, entry_id: str, **fields: Any) -> None:
        self._edit_entry("experience", ExperienceEntry, entry_id, fields)

    def remove_experience(self, entry_id: str) -> None:
        self._remove_entry("experience", entry_id)

    def set_current_job(self, entry_id: str, checked: bool) -> None:
        """Toggle currentJob; switching it on clears that entry's end date."""
        fields: dict = {"current_job": bool(checked)}
        if checked:
            fields["end_date"] = ""
        self._edit_entry("experience", ExperienceEntry, entry_id, fields)

    def set_responsibilities_text(self, entry_id: str, text: str) -> None:
        """One responsibility per non-blank line."""
        lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
        self._edit_entry("experience", ExperienceEntry, entry_id, {"responsibilities": lines})

    def add_language(self) -> LanguageEntry:
        entry = LanguageEntry(id=new_entry_id())
        self.update(languages=[*self._document.languages, entry])
        return entry

    def update_language(self, entry_id: str, **fields: Any) -> None:
        self._edit_entry("languages", LanguageEntry, entry_id, fields)

    def remove_language(self, entry_id: str) -> None:
        self._remove_entry("languages", entry_id)

    def toggle_medical_skill(self, skill: str, selected: bool) -> None:
        skills = [s for s in self._document.medical_skills if s != skill]
        if selected:
            skills.append(skill)
        self.update(medical_skills=skills)

    def add_custom_medical_skill(self, skill: str) -> bool:
        skill = (skill or "").strip()
        if not skill or skill in self._document.medical_skills:
            return False
        self.toggle_medical_skill(skill, True)
        return True

    # ----- snapshots -----

    def export_snapshot(self) -> dict:
        """Serializable copy of the document plus exportedAt / version. Does not touch state."""
        return {
            **self._document.to_dict(),
            "exportedAt": self._clock().isoformat(),
            "version": SNAPSHOT_VERSION,
        }

    def export_json(self) -> str:
        return json.dumps(self.export_snapshot(), indent=2, ensure_ascii=False)

    def snapshot_filename(self, today: Optional[date] = None) -> str:
        today = today or self._clock().date()
        first_name = self._document.personal_info.first_name or "data"
        return f"europass-resume-{first_name}-{today.isoformat()}.json"

    def import_snapshot(self, content: Union[str, bytes]) -> ResumeDocument:
        """Replace the document with an exported snapshot; the old one is kept on error."""
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ResumeImportError("Failed to read file") from e
        try:
            data = json.loads(content)
        except (ValueError, RecursionError) as e:
            raise ResumeImportError("Failed to parse file") from e
        if not isinstance(data, dict):
            raise ResumeImportError("Invalid file format")

        document = normalize({k: v for k, v in data.items() if k not in SNAPSHOT_METADATA_KEYS})
        self._replace(document)
        self.persist()
        logger.info("Imported resume snapshot (version %s)", data.get("version", "unknown"))
        return document

    # ----- wizard -----

    def validate_gate(self, step: int) -> bool:
        """Only the personal-info step (1) has a hard requirement."""
        if step == 1:
            info = self._document.personal_info
            return bool(info.first_name and info.last_name and info.email)
        return True
