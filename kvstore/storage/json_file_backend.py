"""Store backed by a single JSON document on disk.

The document is a JSON object whose property names are encoded keys (see
`kvstore.keys.encode_key`) and whose values are stored natively. Only values
JSON can represent without loss are accepted: None, bool, int, float, str,
and lists/dicts of those with str dict keys. Anything else, including raw
bytes, raises `UnsupportedValueError` instead of being silently altered.
"""
from __future__ import annotations

import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Type

from kvstore import keys as keyutil
from kvstore.errors import (
    NoSuchKeyError,
    ReadError,
    UnsupportedValueError,
    WriteError,
)
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Backend that keeps all entries in one JSON file.

    Parameters
    - path: location of the JSON document. Parent directories are created on
      first write; a missing or empty file is an empty store.
    """

    # largest accepted float magnitude
    MAX_FLOAT = 1.0e14

    def __init__(self, path: str | Path) -> None:
        if not isinstance(path, (str, Path)) or not str(path):
            raise ValueError(f"The path must be a non-empty string or Path. Got: {path!r}")
        self.path = Path(path)

    def _check_value(self, value: Any) -> None:
        if value is None or isinstance(value, (bool, int, str)):
            return
        if isinstance(value, float):
            if not math.isfinite(value) or abs(value) > self.MAX_FLOAT:
                raise UnsupportedValueError(
                    f"The JSON file store cannot handle floats larger than {self.MAX_FLOAT:.1e} "
                    f"or non-finite floats. Got: {value!r}"
                )
            return
        if isinstance(value, list):
            for item in value:
                self._check_value(item)
            return
        if isinstance(value, dict):
            for k, item in value.items():
                if not isinstance(k, str):
                    raise UnsupportedValueError(
                        f"The JSON file store only supports dicts with str keys. Got key: {k!r}"
                    )
                self._check_value(item)
            return
        if isinstance(value, (bytes, bytearray, memoryview)):
            raise UnsupportedValueError.for_type("binary", self)
        raise UnsupportedValueError.for_value(value, self)

    def _load(self, error: Type[ReadError] | Type[WriteError] = ReadError) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            contents = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise error(f"Could not read {self.path}: {exc}") from exc
        if not contents.strip():
            return {}
        try:
            data = json.loads(contents)
        except ValueError as exc:
            raise error(f"Could not decode JSON data in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise error(f"Expected a JSON object in {self.path}, got {type(data).__name__}")
        logger.debug("JsonFileStore loaded %s (%d entries)", self.path, len(data))
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        encoded = json.dumps(data, allow_nan=False)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(encoded)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(self.path)
        except OSError as exc:
            raise WriteError(f"Could not write {self.path}: {exc}") from exc

    def _decode(self, name: str) -> Key:
        try:
            return keyutil.decode_key(name)
        except ValueError as exc:
            raise ReadError(f"Invalid key {name!r} in {self.path}: {exc}") from exc

    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)
        self._check_value(value)
        data = self._load(WriteError)
        data[keyutil.encode_key(key)] = value
        self._save(data)

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        return self._load().get(keyutil.encode_key(key), default)

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        data = self._load()
        name = keyutil.encode_key(key)
        if name not in data:
            raise NoSuchKeyError.for_key(key)
        return data[name]

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        data = self._load()
        return {key: data.get(keyutil.encode_key(key), default) for key in keys}

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        data = self._load()
        missing = keyutil.unique(k for k in keys if keyutil.encode_key(k) not in data)
        if missing:
            raise NoSuchKeyError.for_keys(missing)
        return {key: data[keyutil.encode_key(key)] for key in keys}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        data = self._load(WriteError)
        name = keyutil.encode_key(key)
        if name not in data:
            return False
        del data[name]
        self._save(data)
        return True

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        return keyutil.encode_key(key) in self._load()

    def clear(self) -> None:
        self._save({})

    def keys(self) -> List[Key]:
        return [self._decode(name) for name in self._load()]
