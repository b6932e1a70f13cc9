"""Factory for creating key-value storage backends."""

from typing import Any

from .base import KeyValueStore


def create_key_value_store(
    backend: str = "memory",
    **kwargs: Any
) -> KeyValueStore:
    """Create a key-value storage backend.

    Args:
        backend: Backend type ("memory" or "file")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.rankchat/store.json)

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryStore
        return InMemoryStore(**kwargs)

    elif backend == "file":
        from .json_file import JsonFileStore
        return JsonFileStore(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: memory, file"
    )
