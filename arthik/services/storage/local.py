"""
Local Storage Implementations

MemoryStorage holds values for the life of the process. JsonFileStorage
keeps them in a single JSON object on disk, rewritten atomically on every
change.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from arthik.services.storage.interface import (
    KeyValueStorage,
    StorageCorruptedError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class MemoryStorage(KeyValueStorage):
    """In-process storage. Contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def snapshot(self) -> dict[str, Any]:
        """Copy of the current contents."""
        return dict(self._data)


class JsonFileStorage(KeyValueStorage):
    """
    Storage backed by one JSON file.

    The file is read lazily on first access. A file that exists but does
    not hold a JSON object raises StorageCorruptedError; callers decide
    whether to start fresh.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize file storage.

        Args:
            path: JSON file location. Parent directories are created on write.
        """
        self._path = Path(path).expanduser()
        self._data: Optional[dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        if not self._path.exists():
            self._data = {}
            return self._data

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            self._data = {}
            return self._data

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptedError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise StorageCorruptedError(f"{self._path} does not hold a JSON object")

        self._data = data
        return self._data

    def _flush(self) -> None:
        data = self._data or {}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=self._path.name, suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

        logger.debug("storage_flushed", path=str(self._path), keys=len(data))

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush()

    def clear(self) -> None:
        self._data = {}
        if self._path.exists():
            self._flush()
