import pytest

from kvstore.decorators.sortable import SortableDecorator
from kvstore.sorting import SortFlag
from kvstore.storage.memory_backend import MemoryStore


def test_keys_unsorted_until_requested():
    store = SortableDecorator(MemoryStore({"b": 1, "a": 2}))
    assert store.keys() == ["b", "a"]
    store.sort()
    assert store.keys() == ["a", "b"]


def test_sort_does_not_touch_inner_store():
    inner = MemoryStore({"b": 1, "a": 2})
    store = SortableDecorator(inner)
    store.sort()
    assert store.keys() == ["a", "b"]
    assert inner.keys() == ["b", "a"]


def test_set_drops_the_sort_request():
    store = SortableDecorator(MemoryStore({"b": 1, "a": 2}))
    store.sort()
    store.set("c", 3)
    assert store.keys() == ["b", "a", "c"]


def test_remove_keeps_the_sort_request():
    store = SortableDecorator(MemoryStore({"c": 1, "b": 2, "a": 3}))
    store.sort()
    store.remove("b")
    assert store.keys() == ["a", "c"]


def test_sort_flags():
    store = SortableDecorator(MemoryStore({"img10": 1, "img2": 2, "IMG1": 3}))
    store.sort(SortFlag.NATURAL | SortFlag.FLAG_CASE)
    assert store.keys() == ["IMG1", "img2", "img10"]
    store.sort(SortFlag.STRING)
    assert store.keys() == ["IMG1", "img10", "img2"]


def test_unsupported_flags_rejected_by_sort():
    store = SortableDecorator(MemoryStore({"b": 1, "a": 2}))
    store.sort(SortFlag.NATURAL)
    with pytest.raises(ValueError):
        store.sort(SortFlag.NUMERIC | SortFlag.STRING)
    assert store.keys() == ["a", "b"]
