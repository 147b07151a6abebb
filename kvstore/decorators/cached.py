"""CachedStore: read-through cache in front of a slower store."""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from kvstore import keys as keyutil
from kvstore.cache.interfaces import Cache
from kvstore.decorators.base import AbstractDecorator
from kvstore.errors import ConfigurationError, NoSuchKeyError
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

_MISSING = object()


class CachedStore(AbstractDecorator):
    """Caches reads of the wrapped store.

    The wrapped store is authoritative: writes and removals go to it first
    and only then to the cache, so a failing write never leaves the cache
    ahead of the store.

    Args:
        store: The store to cache.
        cache: Any object implementing `kvstore.cache.Cache`.
        ttl: Lifetime of cache entries, as seconds or a timedelta. ``None`` or
            ``0`` keeps entries until they are removed.
        delete_all: Callable dropping every cache entry, used by `clear()`.
        flush_all: Fallback for `clear()` when `delete_all` is not given.
    """

    def __init__(
        self,
        store: KeyValueStore,
        cache: Cache,
        ttl: Union[None, int, float, timedelta] = None,
        *,
        delete_all: Optional[Callable[[], Any]] = None,
        flush_all: Optional[Callable[[], Any]] = None,
    ) -> None:
        if delete_all is None and flush_all is None:
            raise ConfigurationError(
                "The cache must provide delete_all or flush_all so that clear() can empty it."
            )
        if isinstance(ttl, timedelta):
            ttl = ttl.total_seconds()
        if ttl is not None and ttl < 0:
            raise ConfigurationError(f"The TTL must not be negative. Got: {ttl}")
        super().__init__(store)
        self.cache = cache
        self.ttl = ttl or None
        self._clear_cache = delete_all if delete_all is not None else flush_all

    @classmethod
    def for_cache(cls, store: KeyValueStore, cache: Any, ttl: Union[None, int, float, timedelta] = None) -> "CachedStore":
        """Build a CachedStore using the cache's own delete_all/flush_all methods."""
        return cls(
            store,
            cache,
            ttl,
            delete_all=getattr(cache, "delete_all", None),
            flush_all=getattr(cache, "flush_all", None),
        )

    def set(self, key: Key, value: Any) -> None:
        self.store.set(key, value)
        self.cache.save(key, value, self.ttl)

    def _cached(self, key: Key) -> Any:
        value = self.cache.fetch(key, _MISSING)
        if value is _MISSING:
            logger.debug("Cache miss for key %r", key)
        else:
            logger.debug("Cache hit for key %r", key)
        return value

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        value = self._cached(key)
        if value is not _MISSING:
            return value
        try:
            value = self.store.get_or_fail(key)
        except NoSuchKeyError:
            return default
        self.cache.save(key, value, self.ttl)
        return value

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        value = self._cached(key)
        if value is not _MISSING:
            return value
        value = self.store.get_or_fail(key)
        self.cache.save(key, value, self.ttl)
        return value

    def _split(self, keys: Iterable[Key]):
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        wanted = keyutil.unique(keys)
        cached: Dict[Key, Any] = {}
        uncached: List[Key] = []
        for key in wanted:
            value = self.cache.fetch(key, _MISSING)
            if value is _MISSING:
                uncached.append(key)
            else:
                cached[key] = value
        return wanted, cached, uncached

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        wanted, values, uncached = self._split(keys)
        if uncached:
            fetched = self.store.get_multiple(uncached, _MISSING)
            for key, value in fetched.items():
                if value is _MISSING:
                    values[key] = default
                else:
                    self.cache.save(key, value, self.ttl)
                    values[key] = value
        logger.debug("get_multiple: %d cached, %d fetched", len(wanted) - len(uncached), len(uncached))
        return {key: values[key] for key in wanted}

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        wanted, values, uncached = self._split(keys)
        if uncached:
            fetched = self.store.get_multiple_or_fail(uncached)
            for key, value in fetched.items():
                self.cache.save(key, value, self.ttl)
                values[key] = value
        return {key: values[key] for key in wanted}

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        if self.cache.contains(key):
            return True
        return self.store.exists(key)

    def remove(self, key: Key) -> bool:
        removed = self.store.remove(key)
        self.cache.delete(key)
        return removed

    def clear(self) -> None:
        self.store.clear()
        self._clear_cache()
