"""Simple memory-backed store.

Entries live in a dict guarded by a lock. With ``serialize=True`` values are
passed through a serializer on the way in and out, so stored objects are
isolated from later mutation by the caller and unserializable values are
rejected exactly like in byte-backed stores.
"""
from __future__ import annotations

from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional

from kvstore import keys as keyutil
from kvstore.errors import NoSuchKeyError
from kvstore.keys import Key
from kvstore.sorting import SortFlag, sort_keys
from kvstore.storage.base import CountableStore, SortableStore
from kvstore.storage.serializer import PickleSerializer, Serializer

_MISSING = object()


class MemoryStore(CountableStore, SortableStore):
    def __init__(self, data: Optional[Mapping[Key, Any]] = None, serialize: bool = False,
                 serializer: Optional[Serializer] = None) -> None:
        self._lock = RLock()
        self._store: Dict[Key, Any] = {}
        self._serializer: Optional[Serializer] = None
        if serialize or serializer is not None:
            self._serializer = serializer or PickleSerializer()
        for key, value in (data or {}).items():
            self.set(key, value)

    def _dump(self, value: Any) -> Any:
        return self._serializer.dump(value) if self._serializer else value

    def _load(self, stored: Any) -> Any:
        return self._serializer.load(stored) if self._serializer else stored

    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)
        stored = self._dump(value)
        with self._lock:
            self._store[key] = stored

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        with self._lock:
            if key not in self._store:
                return default
            stored = self._store[key]
        return self._load(stored)

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        with self._lock:
            if key not in self._store:
                raise NoSuchKeyError.for_key(key)
            stored = self._store[key]
        return self._load(stored)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        values: Dict[Key, Any] = {}
        with self._lock:
            for key in keys:
                values[key] = self._load(self._store[key]) if key in self._store else default
        return values

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        with self._lock:
            missing = keyutil.unique(k for k in keys if k not in self._store)
            if missing:
                raise NoSuchKeyError.for_keys(missing)
            return {key: self._load(self._store[key]) for key in keys}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        with self._lock:
            return self._store.pop(key, _MISSING) is not _MISSING

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        with self._lock:
            return key in self._store

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def keys(self) -> List[Key]:
        with self._lock:
            return list(self._store.keys())

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    def sort(self, flags: SortFlag = SortFlag.REGULAR) -> None:
        """Reorder the stored entries by key."""
        with self._lock:
            ordered = sort_keys(self._store.keys(), flags)
            self._store = {key: self._store[key] for key in ordered}

    def to_dict(self) -> Dict[Key, Any]:
        """Return a copy of all entries with deserialized values."""
        with self._lock:
            items = list(self._store.items())
        return {key: self._load(stored) for key, stored in items}


class SerializingMemoryStore(MemoryStore):
    """MemoryStore that always serializes values."""

    def __init__(self, data: Optional[Mapping[Key, Any]] = None,
                 serializer: Optional[Serializer] = None) -> None:
        super().__init__(data, serialize=True, serializer=serializer)

