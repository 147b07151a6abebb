"""SortableDecorator: client-side ordering of `keys()`."""
from __future__ import annotations

from typing import Any, List, Optional

from kvstore.decorators.base import AbstractDecorator
from kvstore.keys import Key
from kvstore.sorting import SortFlag, sort_keys, validate_flags
from kvstore.storage.base import KeyValueStore, SortableStore


class SortableDecorator(AbstractDecorator, SortableStore):
    """Sorts the keys of the wrapped store on request.

    `sort()` only records the flags; `keys()` applies them. Sorting is a
    one-shot hint, not a standing index: any `set` drops the request and
    `keys()` returns the wrapped store's natural order again until `sort()`
    is called anew.
    """

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__(store)
        self._flags: Optional[SortFlag] = None

    def sort(self, flags: SortFlag = SortFlag.REGULAR) -> None:
        self._flags = validate_flags(flags)

    def set(self, key: Key, value: Any) -> None:
        self._flags = None
        self.store.set(key, value)

    def keys(self) -> List[Key]:
        keys = self.store.keys()
        if self._flags is None:
            return keys
        return sort_keys(keys, self._flags)
