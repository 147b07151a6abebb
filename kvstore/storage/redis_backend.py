"""RedisStore: remote key-value backend on top of a redis-py client.

Keys are stored under their encoded form (`kvstore.keys.encode_key`) so that
integer and string keys stay distinct; values are serialized bytes.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from kvstore import keys as keyutil
from kvstore.errors import NoSuchKeyError, ReadError, WriteError
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore
from kvstore.storage.serializer import PickleSerializer, Serializer

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6379


class RedisStore(KeyValueStore):
    """Store backed by a Redis database.

    Parameters
    - client: a redis-py compatible client. When omitted, a `redis.Redis`
      client for DEFAULT_HOST:DEFAULT_PORT is created (requires the
      ``redis`` extra).
    - serializer: codec for values (defaults to pickle).

    `clear()` flushes the whole Redis database the client points at.
    """

    def __init__(self, client: Any = None, serializer: Optional[Serializer] = None) -> None:
        if client is None:
            try:
                import redis
            except ImportError as exc:
                raise ImportError(
                    "RedisStore requires the 'redis' package. "
                    "Install it with: pip install kvstore[redis]"
                ) from exc
            logger.debug("Connecting RedisStore to %s:%s", DEFAULT_HOST, DEFAULT_PORT)
            client = redis.Redis(host=DEFAULT_HOST, port=DEFAULT_PORT)
        self.client = client
        self._serializer = serializer or PickleSerializer()

    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)
        serialized = self._serializer.dump(value)
        try:
            self.client.set(keyutil.encode_key(key), serialized)
        except Exception as exc:
            raise WriteError.for_exception(exc) from exc

    def _fetch(self, key: Key) -> Optional[bytes]:
        try:
            return self.client.get(keyutil.encode_key(key))
        except Exception as exc:
            raise ReadError.for_exception(exc) from exc

    def _fetch_many(self, keys: List[Key]) -> List[Optional[bytes]]:
        if not keys:
            return []
        try:
            return list(self.client.mget([keyutil.encode_key(k) for k in keys]))
        except Exception as exc:
            raise ReadError.for_exception(exc) from exc

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        data = self._fetch(key)
        if data is None:
            return default
        return self._serializer.load(data)

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        data = self._fetch(key)
        if data is None:
            raise NoSuchKeyError.for_key(key)
        return self._serializer.load(data)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        wanted = keyutil.unique(keys)
        values: Dict[Key, Any] = {}
        for key, data in zip(wanted, self._fetch_many(wanted)):
            values[key] = default if data is None else self._serializer.load(data)
        return values

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        wanted = keyutil.unique(keys)
        fetched = list(zip(wanted, self._fetch_many(wanted)))
        missing = [key for key, data in fetched if data is None]
        if missing:
            raise NoSuchKeyError.for_keys(missing)
        return {key: self._serializer.load(data) for key, data in fetched}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        try:
            return bool(self.client.delete(keyutil.encode_key(key)))
        except Exception as exc:
            raise WriteError.for_exception(exc) from exc

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        try:
            return bool(self.client.exists(keyutil.encode_key(key)))
        except Exception as exc:
            raise ReadError.for_exception(exc) from exc

    def clear(self) -> None:
        try:
            self.client.flushdb()
        except Exception as exc:
            raise WriteError.for_exception(exc) from exc

    def keys(self) -> List[Key]:
        try:
            names = list(self.client.scan_iter(match="*"))
        except Exception as exc:
            raise ReadError.for_exception(exc) from exc
        keys: List[Key] = []
        for name in names:
            try:
                keys.append(keyutil.decode_key(name))
            except ValueError:
                logger.warning("Skipping foreign Redis key: %r", name)
        return keys
