"""Key-value storage module for rankchat.

Provides the get/set capability the session persists messages, pins and
settings through, so nothing above it depends on a specific backend.
"""

from .base import KeyValueStore
from .factory import create_key_value_store
from .in_memory import InMemoryStore
from .json_file import JsonFileStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "create_key_value_store",
]
