"""Key-value store abstraction with pluggable backends and decorators."""

from .cache import Cache, MemoryCache
from .decorators import CachedStore, CountableDecorator, SortableDecorator
from .errors import (
    ConfigurationError,
    DeserializationError,
    InvalidKeyError,
    KeyValueStoreError,
    NoSuchKeyError,
    ReadError,
    SerializationError,
    UnsupportedValueError,
    WriteError,
)
from .sorting import SortFlag
from .storage import (
    CountableStore,
    DirectoryStore,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    NullStore,
    RedisStore,
    SerializingMemoryStore,
    SortableStore,
    SqliteStore,
    create_store,
)

__version__ = "0.1.0"

__all__ = [
    "Cache",
    "CachedStore",
    "ConfigurationError",
    "CountableDecorator",
    "CountableStore",
    "DeserializationError",
    "DirectoryStore",
    "InvalidKeyError",
    "JsonFileStore",
    "KeyValueStore",
    "KeyValueStoreError",
    "MemoryCache",
    "MemoryStore",
    "NoSuchKeyError",
    "NullStore",
    "ReadError",
    "RedisStore",
    "SerializationError",
    "SerializingMemoryStore",
    "SortFlag",
    "SortableDecorator",
    "SortableStore",
    "SqliteStore",
    "UnsupportedValueError",
    "WriteError",
    "create_store",
]
