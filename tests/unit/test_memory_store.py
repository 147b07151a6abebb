import pytest

from kvstore.errors import InvalidKeyError, NoSuchKeyError, SerializationError
from kvstore.sorting import SortFlag
from kvstore.storage.memory_backend import MemoryStore, SerializingMemoryStore


def test_memory_basic_operations():
    m = MemoryStore()

    m.set("a", 1234)
    m.set(5, "x")
    assert m.get("a") == 1234
    assert m.get(5) == "x"
    assert m.get("5") is None
    assert m.keys() == ["a", 5]
    assert m.count() == 2
    assert len(m) == 2

    assert m.remove("a") is True
    assert m.remove("a") is False
    assert m.exists("a") is False
    assert m.exists(5) is True

    m.clear()
    assert m.keys() == []


def test_memory_initial_data():
    m = MemoryStore({"a": 1, 2: "b"})
    assert m.to_dict() == {"a": 1, 2: "b"}


def test_memory_initial_data_validates_keys():
    with pytest.raises(InvalidKeyError):
        MemoryStore({1.5: "x"})


def test_memory_get_multiple():
    m = MemoryStore({"a": 1, "b": 2})
    assert m.get_multiple(["a", "c", "a"], default=0) == {"a": 1, "c": 0}
    assert m.get_multiple_or_fail({7: "b", 9: "a"}) == {"b": 2, "a": 1}
    with pytest.raises(NoSuchKeyError) as exc:
        m.get_multiple_or_fail(["x", "a", "y", "x"])
    assert exc.value.keys == ["x", "y"]


def test_memory_store_shares_objects_without_serialization():
    value = [1]
    m = MemoryStore()
    m.set("k", value)
    value.append(2)
    assert m.get("k") == [1, 2]


def test_serializing_memory_store_isolates_values():
    value = [1]
    m = SerializingMemoryStore()
    m.set("k", value)
    value.append(2)
    assert m.get("k") == [1]


def test_serializing_memory_store_rejects_unserializable():
    m = SerializingMemoryStore()
    with pytest.raises(SerializationError):
        m.set("k", lambda: None)
    assert m.exists("k") is False


def test_memory_sort_reorders_keys():
    m = MemoryStore({"b": 1, "a": 2, 10: 3, 9: 4})
    m.sort()
    assert m.keys() == [9, 10, "a", "b"]
    m.sort(SortFlag.STRING)
    assert m.keys() == [10, 9, "a", "b"]


def test_memory_invalid_key_on_every_operation():
    m = MemoryStore()
    with pytest.raises(InvalidKeyError):
        m.set(None, 1)
    with pytest.raises(InvalidKeyError):
        m.get([1])
    with pytest.raises(InvalidKeyError):
        m.remove(1.0)
    with pytest.raises(InvalidKeyError):
        m.get_multiple(["a", None])
