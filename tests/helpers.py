from fnmatch import fnmatchcase
from typing import Any, Dict, List

from kvstore.storage.memory_backend import MemoryStore


class Point:
    """Plain object with a private attribute, used as a stored value."""

    def __init__(self, x, y, secret="hidden"):
        self.x = x
        self.y = y
        self._secret = secret

    def __eq__(self, other):
        return (
            isinstance(other, Point)
            and (self.x, self.y, self._secret) == (other.x, other.y, other._secret)
        )

    def __repr__(self):
        return f"Point({self.x!r}, {self.y!r})"


class FakeRedis:
    """In-memory stand-in for the subset of redis-py used by RedisStore.

    Names and values are stored as bytes, the way a real server returns them.
    Setting `fail` to an exception makes every call raise it.
    """

    def __init__(self):
        self.data: Dict[bytes, bytes] = {}
        self.fail = None
        self.calls: List[str] = []

    def _enter(self, name):
        self.calls.append(name)
        if self.fail is not None:
            raise self.fail

    @staticmethod
    def _b(value):
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def set(self, name, value):
        self._enter("set")
        self.data[self._b(name)] = self._b(value)
        return True

    def get(self, name):
        self._enter("get")
        return self.data.get(self._b(name))

    def mget(self, names):
        self._enter("mget")
        return [self.data.get(self._b(n)) for n in names]

    def delete(self, *names):
        self._enter("delete")
        return sum(1 for n in names if self.data.pop(self._b(n), None) is not None)

    def exists(self, *names):
        self._enter("exists")
        return sum(1 for n in names if self._b(n) in self.data)

    def flushdb(self):
        self._enter("flushdb")
        self.data.clear()
        return True

    def scan_iter(self, match=None):
        self._enter("scan_iter")
        for name in list(self.data):
            if match is None or fnmatchcase(name.decode("utf-8"), match):
                yield name


class FakeCache:
    """Dict cache recording how it was used."""

    def __init__(self):
        self.entries: Dict[Any, Any] = {}
        self.saved: List[tuple] = []
        self.deleted: List[Any] = []
        self.cleared = 0

    def contains(self, key):
        return key in self.entries

    def fetch(self, key, default=None):
        return self.entries.get(key, default)

    def save(self, key, value, ttl=None):
        self.saved.append((key, value, ttl))
        self.entries[key] = value

    def delete(self, key):
        self.deleted.append(key)
        return self.entries.pop(key, None) is not None

    def delete_all(self):
        self.cleared += 1
        self.entries.clear()


class CountingStore(MemoryStore):
    """MemoryStore that counts calls per operation."""

    def __init__(self, *args, **kwargs):
        self.calls: Dict[str, int] = {}
        super().__init__(*args, **kwargs)

    def _hit(self, name):
        self.calls[name] = self.calls.get(name, 0) + 1

    def set(self, key, value):
        self._hit("set")
        super().set(key, value)

    def get(self, key, default=None):
        self._hit("get")
        return super().get(key, default)

    def get_or_fail(self, key):
        self._hit("get_or_fail")
        return super().get_or_fail(key)

    def get_multiple(self, keys, default=None):
        self._hit("get_multiple")
        return super().get_multiple(keys, default)

    def get_multiple_or_fail(self, keys):
        self._hit("get_multiple_or_fail")
        return super().get_multiple_or_fail(keys)

    def exists(self, key):
        self._hit("exists")
        return super().exists(key)

    def keys(self):
        self._hit("keys")
        return super().keys()
