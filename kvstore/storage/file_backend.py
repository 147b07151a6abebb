"""File-backed store keeping one file per key.

Entries are stored under `<data_dir>/<digest>.val`, where the digest is the
SHA-256 of the encoded key, so names have a fixed length whatever the key.
Each file starts with the encoded key on its own line, followed by the
serialized value; `keys()` reads the key back from that header. Writes are
atomic: the entry is written to a temporary file which then replaces the
target.
"""
from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from kvstore import keys as keyutil
from kvstore.errors import DeserializationError, NoSuchKeyError, ReadError, WriteError
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore
from kvstore.storage.serializer import PickleSerializer, Serializer

logger = logging.getLogger(__name__)


class DirectoryStore(KeyValueStore):
    SUFFIX = ".val"

    def __init__(self, data_dir: str | Path = "./data", serializer: Optional[Serializer] = None) -> None:
        self.data_dir = Path(data_dir)
        self._serializer = serializer or PickleSerializer()
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError.for_exception(exc) from exc

    @staticmethod
    def _header(key: Key) -> bytes:
        # encoded keys never contain a raw newline
        return keyutil.encode_key(key).encode("utf-8")

    def _path_for(self, key: Key) -> Path:
        name = hashlib.sha256(self._header(key)).hexdigest()
        return self.data_dir / f"{name}{self.SUFFIX}"

    def _read(self, key: Key) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ReadError.for_exception(exc) from exc
        header, sep, payload = data.partition(b"\n")
        if not sep or header != self._header(key):
            raise DeserializationError.for_value(data, f"entry file {path.name} does not hold key {key!r}")
        return payload

    def _key_for(self, path: Path) -> Key:
        with open(path, "rb") as f:
            header = f.readline()
        if not header.endswith(b"\n"):
            raise ValueError(f"No key header in {path}")
        return keyutil.decode_key(header[:-1])

    def _entries(self) -> List[Path]:
        try:
            return [p for p in self.data_dir.iterdir() if p.is_file() and p.suffix == self.SUFFIX]
        except FileNotFoundError:
            return []

    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)
        serialized = self._serializer.dump(value)
        path = self._path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "wb") as f:
                f.write(self._header(key) + b"\n")
                f.write(serialized)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(path)
        except OSError as exc:
            raise WriteError.for_exception(exc) from exc

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        data = self._read(key)
        if data is None:
            return default
        return self._serializer.load(data)

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        data = self._read(key)
        if data is None:
            raise NoSuchKeyError.for_key(key)
        return self._serializer.load(data)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        values: Dict[Key, Any] = {}
        for key in keys:
            data = self._read(key)
            values[key] = default if data is None else self._serializer.load(data)
        return values

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        raw: Dict[Key, bytes] = {}
        missing: List[Key] = []
        for key in keyutil.unique(keys):
            data = self._read(key)
            if data is None:
                missing.append(key)
            else:
                raw[key] = data
        if missing:
            raise NoSuchKeyError.for_keys(missing)
        return {key: self._serializer.load(data) for key, data in raw.items()}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise WriteError.for_exception(exc) from exc
        return True

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        try:
            return self._path_for(key).is_file()
        except OSError as exc:
            raise ReadError.for_exception(exc) from exc

    def clear(self) -> None:
        try:
            for path in self._entries():
                path.unlink(missing_ok=True)
        except OSError as exc:
            raise WriteError.for_exception(exc) from exc

    def keys(self) -> List[Key]:
        try:
            entries = self._entries()
        except OSError as exc:
            raise ReadError.for_exception(exc) from exc
        keys: List[Key] = []
        for path in entries:
            try:
                keys.append(self._key_for(path))
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise ReadError.for_exception(exc) from exc
            except ValueError:
                logger.warning("Skipping foreign file in store directory: %s", path)
        return keys
