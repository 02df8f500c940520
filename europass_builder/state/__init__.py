"""Session state: persistence boundary and the résumé controller."""

from .controller import ResumeController
from .storage import FileStore, KeyValueStore, MemoryStore, open_default_store

__all__ = ["ResumeController", "KeyValueStore", "FileStore", "MemoryStore", "open_default_store"]
