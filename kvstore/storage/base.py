"""Store contract definitions.

Defines the KeyValueStore abstract class implemented by every backend and
decorator. Implementations validate keys before any I/O, translate native
failures into `ReadError`/`WriteError`, and must be observably identical:
a test written against this contract passes against every implementation.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List

from kvstore.sorting import SortFlag

if TYPE_CHECKING:
    from kvstore.keys import Key


class KeyValueStore(ABC):
    """Abstract key-value store.

    Keys are ints or strs; values are arbitrary Python objects (backends may
    restrict them and raise `UnsupportedValueError`). `None` is a storable
    value, distinct from an absent key.
    """

    @abstractmethod
    def set(self, key: Key, value: Any) -> None:
        """Create or overwrite the entry for `key`.

        Raises `InvalidKeyError`, `SerializationError`,
        `UnsupportedValueError` or `WriteError`.
        """

    @abstractmethod
    def get(self, key: Key, default: Any = None) -> Any:
        """Return the value for `key`, or `default` if it is absent."""

    @abstractmethod
    def get_or_fail(self, key: Key) -> Any:
        """Return the value for `key`. Raise `NoSuchKeyError` if absent."""

    @abstractmethod
    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        """Return a mapping of every requested key to its value.

        Positional indices of `keys` are ignored and duplicates collapse.
        Absent keys map to `default`.
        """

    @abstractmethod
    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        """Return a mapping of every requested key to its value.

        Raise `NoSuchKeyError` naming all absent keys, not just the first.
        """

    @abstractmethod
    def remove(self, key: Key) -> bool:
        """Remove `key`. Return True iff an entry existed and was removed."""

    @abstractmethod
    def exists(self, key: Key) -> bool:
        """Return True if `key` is set."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    def keys(self) -> List[Key]:
        """Return all keys. The order is undefined unless sorted."""


class CountableStore(KeyValueStore):
    """A store that can report how many entries it holds."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of entries."""

    def __len__(self) -> int:
        return self.count()


class SortableStore(KeyValueStore):
    """A store whose `keys()` can be ordered on request."""

    @abstractmethod
    def sort(self, flags: SortFlag = SortFlag.REGULAR) -> None:
        """Order the keys returned by `keys()` using comparison `flags`."""
