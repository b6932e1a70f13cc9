"""Abstract base class for key-value storage backends.

This module defines the interface the session persists through.
The abstraction hides:
- Storage format (JSON file, process memory)
- Persistence mechanism and write strategy
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Abstract key-value store for JSON-compatible values.

    Values must survive a JSON round trip; backends may serialize them.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
