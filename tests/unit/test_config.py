import pytest

from kvstore.config import StoreConfig, build_store, load_config
from kvstore.decorators import CachedStore, CountableDecorator, SortableDecorator
from kvstore.errors import ConfigurationError
from kvstore.storage import DirectoryStore, JsonFileStore, MemoryStore, SqliteStore, create_store
from kvstore.storage.serializer import JSONSerializer


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "missing.yml")
    assert cfg == StoreConfig()
    assert cfg.backend == "memory"
    assert cfg.cache_ttl is None


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "kvstore.yml"
    path.write_text(
        "backend: sqlite\n"
        "path: data.db\n"
        "table_name: entries\n"
        "serializer: json\n"
        "countable: true\n"
        "cache_ttl: 60\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.backend == "sqlite"
    assert cfg.table_name == "entries"
    assert cfg.countable is True
    assert cfg.cache_ttl == 60


@pytest.mark.parametrize(
    "content",
    ["backend: mongo\n", "- a\n- b\n", "cache_ttl: -1\n", "backend: [unclosed\n"],
)
def test_invalid_config_rejected(tmp_path, content):
    path = tmp_path / "bad.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_build_store_decorator_order():
    store = build_store(StoreConfig(countable=True, sortable=True, cache_ttl=0))
    assert isinstance(store, CachedStore)
    assert isinstance(store.store, SortableDecorator)
    assert isinstance(store.store.store, CountableDecorator)
    assert isinstance(store.store.store.store, MemoryStore)

    store.set("b", 1)
    store.set("a", 2)
    store.store.sort()
    assert store.keys() == ["a", "b"]
    assert store.store.store.count() == 2


def test_build_plain_store():
    assert isinstance(build_store(StoreConfig()), MemoryStore)


def test_build_sqlite_store(tmp_path):
    cfg = StoreConfig(backend="sqlite", path=str(tmp_path / "s.db"), table_name="entries", serializer="json")
    store = build_store(cfg)
    assert isinstance(store, SqliteStore)
    assert store.table_name == "entries"
    store.set(1, {"a": 1})
    assert store.get(1) == {"a": 1}
    store.close()


def test_build_store_reports_bad_options():
    with pytest.raises(ConfigurationError):
        build_store(StoreConfig(backend="json_file"))
    with pytest.raises(ConfigurationError):
        build_store(StoreConfig(backend="directory", serializer="encrypted"))


def test_create_store_by_name(tmp_path):
    assert isinstance(create_store("json_file", path=str(tmp_path / "s.json")), JsonFileStore)
    directory = create_store("directory", "json", path=str(tmp_path / "d"))
    assert isinstance(directory, DirectoryStore)
    assert isinstance(directory._serializer, JSONSerializer)
    with pytest.raises(ValueError):
        create_store("mongo")
