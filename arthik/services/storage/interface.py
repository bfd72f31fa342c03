"""
Abstract Storage Interface

The client keeps two kinds of local state:
1. Session-scoped: the auth and CSRF tokens, gone when the session ends
2. Durable: display preferences, kept across logouts

Both go through the same small key/value interface so they can live in
memory (tests, ephemeral sessions) or in a JSON file on disk.

The interface is intentionally simple: string keys, JSON-compatible values.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for local key/value storage.

    Implementations must make every write visible to the next read.
    """

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Read a value.

        Args:
            key: Storage key
            default: Returned when the key is absent

        Returns:
            The stored value or `default`
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Store a JSON-compatible value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageCorruptedError(StorageError):
    """Stored data exists but cannot be decoded."""
    pass
