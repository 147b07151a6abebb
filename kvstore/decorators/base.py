"""Delegating base for store decorators."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore


class AbstractDecorator(KeyValueStore):
    """Forwards every contract operation to the wrapped store unchanged.

    Subclasses override only the operations they add behaviour to. Errors
    raised by the wrapped store propagate untouched.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def set(self, key: Key, value: Any) -> None:
        self.store.set(key, value)

    def get(self, key: Key, default: Any = None) -> Any:
        return self.store.get(key, default)

    def get_or_fail(self, key: Key) -> Any:
        return self.store.get_or_fail(key)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        return self.store.get_multiple(keys, default)

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        return self.store.get_multiple_or_fail(keys)

    def remove(self, key: Key) -> bool:
        return self.store.remove(key)

    def exists(self, key: Key) -> bool:
        return self.store.exists(key)

    def clear(self) -> None:
        self.store.clear()

    def keys(self) -> List[Key]:
        return self.store.keys()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.store!r})"
