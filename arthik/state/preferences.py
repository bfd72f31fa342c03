"""
Preferences Store

Durable display preferences: dark mode, hidden amounts and the accent
colour. Stored separately from the session and never touched by logout.
"""

import threading
from typing import Optional

import structlog
from pydantic import ValidationError

from arthik.models.preferences import Accent, Preferences
from arthik.services.storage import KeyValueStorage, StorageError


logger = structlog.get_logger(__name__)

PREFERENCES_KEY = "preferences"


class PreferencesStore:
    """Reads and writes `Preferences` through durable storage."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._lock = threading.RLock()
        self._current: Optional[Preferences] = None

    @property
    def current(self) -> Preferences:
        """Current preferences, loaded from storage on first access."""
        with self._lock:
            if self._current is None:
                self._current = self._load()
            return self._current

    def _load(self) -> Preferences:
        try:
            raw = self._storage.get(PREFERENCES_KEY)
        except StorageError as e:
            logger.warning("preferences_load_failed", error=str(e))
            return Preferences()

        if not raw:
            return Preferences()

        try:
            return Preferences.model_validate(raw)
        except ValidationError as e:
            logger.warning("preferences_invalid", error=str(e))
            return Preferences()

    def _save(self, preferences: Preferences) -> Preferences:
        with self._lock:
            self._current = preferences
            try:
                self._storage.set(PREFERENCES_KEY, preferences.model_dump(mode="json"))
            except StorageError as e:
                logger.warning("preferences_save_failed", error=str(e))
            return preferences

    def set_dark_mode(self, enabled: bool) -> Preferences:
        return self._save(self.current.model_copy(update={"dark_mode": enabled}))

    def set_hide_amounts(self, enabled: bool) -> Preferences:
        return self._save(self.current.model_copy(update={"hide_amounts": enabled}))

    def set_accent(self, accent: Accent) -> Preferences:
        return self._save(self.current.model_copy(update={"accent": accent}))
