"""
Storage Services Package

Provides the local key/value interface and its implementations. Session
tokens and display preferences are both kept through it.
"""

from arthik.services.storage.interface import (
    KeyValueStorage,
    StorageCorruptedError,
    StorageError,
)
from arthik.services.storage.local import JsonFileStorage, MemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageCorruptedError",
    "StorageError",
    # Implementations
    "JsonFileStorage",
    "MemoryStorage",
]
