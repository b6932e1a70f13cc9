"""JSON file key-value backend.

Keeps all keys in one JSON object on disk, rewritten atomically on every
change. Suitable for a single local user.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import StorageError
from .base import KeyValueStore

DEFAULT_STORE_PATH = Path.home() / ".rankchat" / "store.json"


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON file."""

    def __init__(self, path: str | Path = DEFAULT_STORE_PATH):
        self._path = Path(path).expanduser()
        self._data: dict[str, Any] | None = None

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
            loaded = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read store {self._path}: {e}") from e
        if not isinstance(loaded, dict):
            raise StorageError(f"Store {self._path} does not contain a JSON object")
        self._data = loaded
        return self._data

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write store {self._path}: {e}") from e

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        try:
            # Validate before touching the file
            data[key] = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON-compatible: {e}") from e
        self._flush()

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush()

    def keys(self) -> list[str]:
        return list(self._load())

    @property
    def backend_type(self) -> str:
        return "file"
