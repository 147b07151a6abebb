"""In-process TTL cache usable as the cache of a `CachedStore`."""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from kvstore.errors import SerializationError
from kvstore.storage.serializer import PickleSerializer

logger = logging.getLogger(__name__)


class MemoryCache:
    """Thread-safe dict cache with per-entry expiry.

    Values are kept as pickled copies, so neither the object passed to
    `save` nor one returned by `fetch` shares state with the cache. Values
    that cannot be pickled are not cached. Expired entries are dropped
    lazily, when they are next looked up.
    """

    def __init__(self, default_ttl: Optional[float] = None) -> None:
        self.default_ttl = default_ttl
        self._entries: Dict[Any, Tuple[bytes, Optional[datetime]]] = {}
        self._lock = threading.Lock()
        self._serializer = PickleSerializer()
        self._hits = 0
        self._misses = 0

    def _live_entry(self, key: Any) -> Optional[Tuple[bytes, Optional[datetime]]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at = entry[1]
        if expires_at is not None and datetime.now(timezone.utc) >= expires_at:
            del self._entries[key]
            logger.debug("Cache entry %r expired", key)
            return None
        return entry

    def contains(self, key: Any) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def fetch(self, key: Any, default: Any = None) -> Any:
        """Return a copy of the cached value, or `default` when absent or expired."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return default
            self._hits += 1
            data = entry[0]
        return self._serializer.load(data)

    def save(self, key: Any, value: Any, ttl: Optional[float] = None) -> None:
        if ttl is None:
            ttl = self.default_ttl
        expires_at = None
        if ttl:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
        try:
            data = self._serializer.dump(value)
        except SerializationError as exc:
            logger.debug("Not caching %r: %s", key, exc)
            with self._lock:
                self._entries.pop(key, None)
            return
        with self._lock:
            self._entries[key] = (data, expires_at)

    def delete(self, key: Any) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def flush_all(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}
