from kvstore.decorators.countable import CountableDecorator
from kvstore.storage.base import CountableStore
from tests.helpers import CountingStore


def test_count_is_cached_until_a_write():
    inner = CountingStore({"a": 1, "b": 2})
    store = CountableDecorator(inner)

    assert store.count() == 2
    assert store.count() == 2
    assert inner.calls["keys"] == 1

    store.set("c", 3)
    assert inner.calls["keys"] == 1
    assert store.count() == 3
    assert inner.calls["keys"] == 2


def test_remove_and_clear_invalidate():
    store = CountableDecorator(CountingStore({"a": 1}))
    assert store.count() == 1
    assert store.remove("a") is True
    assert store.count() == 0
    store.set("x", 1)
    store.clear()
    assert len(store) == 0


def test_reads_do_not_invalidate():
    inner = CountingStore({"a": 1})
    store = CountableDecorator(inner)
    store.count()
    store.get("a")
    store.exists("a")
    store.get_multiple(["a"])
    store.count()
    assert inner.calls["keys"] == 1


def test_decorator_is_countable():
    assert isinstance(CountableDecorator(CountingStore()), CountableStore)
