import pytest

from kvstore.cache import Cache, MemoryCache
from kvstore.decorators import CachedStore, CountableDecorator, SortableDecorator
from kvstore.storage import (
    CountableStoreProtocol,
    DirectoryStore,
    JsonFileStore,
    KeyValueStoreProtocol,
    MemoryStore,
    NullStore,
    RedisStore,
    SerializingMemoryStore,
    SortableStoreProtocol,
    SqliteStore,
)
from tests.helpers import FakeRedis


@pytest.fixture
def stores(tmp_path):
    return {
        "memory": MemoryStore(),
        "serializing_memory": SerializingMemoryStore(),
        "null": NullStore(),
        "json_file": JsonFileStore(tmp_path / "s.json"),
        "directory": DirectoryStore(tmp_path / "d"),
        "sqlite": SqliteStore(db_path=":memory:"),
        "redis": RedisStore(client=FakeRedis()),
        "countable": CountableDecorator(MemoryStore()),
        "sortable": SortableDecorator(MemoryStore()),
        "cached": CachedStore.for_cache(MemoryStore(), MemoryCache()),
    }


def test_every_store_satisfies_the_protocol(stores):
    for name, store in stores.items():
        assert isinstance(store, KeyValueStoreProtocol), name


def test_capability_protocols(stores):
    countable = {name for name, s in stores.items() if isinstance(s, CountableStoreProtocol)}
    sortable = {name for name, s in stores.items() if isinstance(s, SortableStoreProtocol)}
    assert countable == {"memory", "serializing_memory", "countable"}
    assert sortable == {"memory", "serializing_memory", "sortable"}


def test_plain_objects_are_not_stores():
    assert not isinstance(object(), KeyValueStoreProtocol)
    assert not isinstance({}, KeyValueStoreProtocol)


def test_memory_cache_satisfies_cache_protocol():
    assert isinstance(MemoryCache(), Cache)
