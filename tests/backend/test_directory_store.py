import hashlib
import logging

import pytest

from kvstore.errors import DeserializationError, WriteError
from kvstore.storage.file_backend import DirectoryStore
from kvstore.storage.serializer import JSONSerializer


def test_one_file_per_key(tmp_path):
    store = DirectoryStore(tmp_path)
    store.set("a", 1)
    store.set(1, 2)
    names = sorted(p.name for p in tmp_path.iterdir())
    expected = [hashlib.sha256(encoded).hexdigest() + ".val" for encoded in (b'"a"', b"1")]
    assert names == sorted(expected)
    assert (tmp_path / expected[0]).read_bytes().startswith(b'"a"\n')


def test_case_sensitive_keys(tmp_path):
    store = DirectoryStore(tmp_path)
    store.set("A", 1)
    store.set("a", 2)
    assert store.get("A") == 1
    assert store.get("a") == 2


def test_no_temp_files_left_behind(tmp_path):
    store = DirectoryStore(tmp_path)
    store.set("a", 1)
    store.set("a", 2)
    assert [p.suffix for p in tmp_path.iterdir()] == [".val"]


def test_foreign_files_are_skipped(tmp_path, caplog):
    store = DirectoryStore(tmp_path)
    store.set("a", 1)
    (tmp_path / "README.txt").write_text("hi", encoding="utf-8")
    (tmp_path / "zz.val").write_text("junk", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="kvstore.storage.file_backend"):
        assert store.keys() == ["a"]
    assert "zz.val" in caplog.text
    store.clear()
    assert (tmp_path / "README.txt").exists()


def test_corrupt_entry_raises_deserialization_error(tmp_path):
    store = DirectoryStore(tmp_path, serializer=JSONSerializer())
    store.set("a", [1])
    next(tmp_path.glob("*.val")).write_bytes(b"{broken")
    with pytest.raises(DeserializationError):
        store.get("a")


def test_directory_cannot_be_created(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(WriteError):
        DirectoryStore(blocker / "sub")


def test_long_keys_use_fixed_length_names(tmp_path):
    store = DirectoryStore(tmp_path)
    key = "k" * 1000
    assert store.get(key, "d") == "d"
    store.set(key, 1)
    assert store.get(key) == 1
    assert store.keys() == [key]
    assert [len(p.name) for p in tmp_path.iterdir()] == [64 + len(".val")]


def test_corrupt_payload_keeps_key_readable(tmp_path):
    store = DirectoryStore(tmp_path, serializer=JSONSerializer())
    store.set(7, [1])
    path = next(tmp_path.glob("*.val"))
    path.write_bytes(b"7\n{broken")
    assert store.keys() == [7]
    with pytest.raises(DeserializationError):
        store.get(7)


def test_entry_holding_another_key_is_rejected(tmp_path):
    store = DirectoryStore(tmp_path)
    store.set("a", 1)
    store.set("b", 2)
    path_a, path_b = store._path_for("a"), store._path_for("b")
    path_a.write_bytes(path_b.read_bytes())
    with pytest.raises(DeserializationError):
        store.get("a")
