"""Storage backends for kvstore."""
from __future__ import annotations

import logging
from typing import Any, Optional

from .base import CountableStore, KeyValueStore, SortableStore
from .file_backend import DirectoryStore
from .interfaces import CountableStoreProtocol, KeyValueStoreProtocol, SortableStoreProtocol
from .json_file_backend import JsonFileStore
from .memory_backend import MemoryStore, SerializingMemoryStore
from .null_backend import NullStore
from .redis_backend import RedisStore
from .serializer import get_serializer
from .sqlite_backend import SqliteStore

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "serializing_memory", "null", "json_file", "directory", "sqlite", "redis")


def create_store(backend: str = "memory", serializer: str = "pickle", *,
                 path: Optional[str] = None, password: Optional[str] = None,
                 key: Optional[bytes] = None, **options: Any) -> KeyValueStore:
    """Build a backend by name.

    `path` is the file for json_file and sqlite and the directory for
    directory stores. The serializer is ignored by backends that do not
    serialize (memory, null and json_file). Remaining options are passed to
    the backend constructor.
    """
    name = backend.lower()
    if name not in BACKENDS:
        raise ValueError(f"Unknown backend {backend!r}. Expected one of: {', '.join(BACKENDS)}")
    logger.debug("Creating %s store (serializer=%s)", name, serializer)

    if name == "memory":
        return MemoryStore(**options)
    if name == "null":
        return NullStore()
    if name == "json_file":
        if path is None:
            raise ValueError("The json_file backend needs a path")
        return JsonFileStore(path)

    codec = get_serializer(serializer, key=key, password=password)
    if name == "serializing_memory":
        return SerializingMemoryStore(serializer=codec, **options)
    if name == "directory":
        return DirectoryStore(path or "./data", serializer=codec)
    if name == "sqlite":
        return SqliteStore(db_path=path or "store.db", serializer=codec, **options)
    return RedisStore(serializer=codec, **options)


__all__ = [
    "BACKENDS",
    "CountableStore",
    "CountableStoreProtocol",
    "DirectoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "KeyValueStoreProtocol",
    "MemoryStore",
    "NullStore",
    "RedisStore",
    "SerializingMemoryStore",
    "SortableStore",
    "SortableStoreProtocol",
    "SqliteStore",
    "create_store",
]
