import pytest

from kvstore.errors import InvalidKeyError, NoSuchKeyError
from kvstore.storage.null_backend import NullStore


def test_null_store_discards_writes():
    s = NullStore()
    s.set("a", 1)
    assert s.get("a") is None
    assert s.get("a", "d") == "d"
    assert s.exists("a") is False
    assert s.remove("a") is False
    assert s.keys() == []
    s.clear()


def test_null_store_fails_lookups():
    s = NullStore()
    with pytest.raises(NoSuchKeyError):
        s.get_or_fail("a")
    with pytest.raises(NoSuchKeyError) as exc:
        s.get_multiple_or_fail(["a", "b", "a"])
    assert exc.value.keys == ["a", "b"]
    assert s.get_multiple_or_fail([]) == {}
    assert s.get_multiple(["a", 1], default=0) == {"a": 0, 1: 0}


def test_null_store_validates_keys():
    with pytest.raises(InvalidKeyError):
        NullStore().set(None, 1)
