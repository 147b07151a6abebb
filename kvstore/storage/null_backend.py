"""A store that discards everything it is given. Useful as a disabled cache."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from kvstore import keys as keyutil
from kvstore.errors import NoSuchKeyError
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore


class NullStore(KeyValueStore):
    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        return default

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        raise NoSuchKeyError.for_key(key)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        return {key: default for key in keys}

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        if keys:
            raise NoSuchKeyError.for_keys(keyutil.unique(keys))
        return {}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        return False

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        return False

    def clear(self) -> None:
        pass

    def keys(self) -> List[Key]:
        return []
