"""In-memory key-value backend.

Data is lost when the application exits. Suitable for tests and
throwaway sessions.
"""

import json
from typing import Any

from ..errors import StorageError
from .base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store holding serialized JSON strings.

    Values are serialized on write so callers see the same behavior as a
    persistent backend: no shared references, no non-JSON values.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-compatible: {e}") from e

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    @property
    def backend_type(self) -> str:
        return "memory"
