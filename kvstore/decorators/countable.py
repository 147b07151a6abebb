"""CountableDecorator: adds a cached `count()` to any store."""
from __future__ import annotations

import logging
from typing import Any

from kvstore.decorators.base import AbstractDecorator
from kvstore.keys import Key
from kvstore.storage.base import CountableStore, KeyValueStore

logger = logging.getLogger(__name__)


class CountableDecorator(AbstractDecorator, CountableStore):
    """Counts the keys of the wrapped store and caches the result.

    The cache is invalidated (not recomputed) by `set`, `remove` and `clear`;
    the next `count()` recomputes it once from `keys()`. Instance state is
    not synchronised: share a decorator between threads only with external
    locking.
    """

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__(store)
        self._count = 0
        self._fresh = False

    def set(self, key: Key, value: Any) -> None:
        self._fresh = False
        self.store.set(key, value)

    def remove(self, key: Key) -> bool:
        self._fresh = False
        return self.store.remove(key)

    def clear(self) -> None:
        self._fresh = False
        self.store.clear()

    def count(self) -> int:
        if not self._fresh:
            self._count = len(self.store.keys())
            self._fresh = True
            logger.debug("Recomputed key count for %r: %d", self.store, self._count)
        return self._count
