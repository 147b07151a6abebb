"""Key validation and the text codec for string-only key spaces.

A key is an ``int`` or a ``str``. ``bool`` is rejected even though it
subclasses ``int``. Integer and string keys are distinct identities: ``1``
and ``"1"`` never address the same entry, so backends whose native key
space is text encode keys with :func:`encode_key`.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Union

from kvstore.errors import InvalidKeyError

Key = Union[int, str]


def is_valid_key(key: Any) -> bool:
    return isinstance(key, (int, str)) and not isinstance(key, bool)


def validate(key: Any) -> None:
    """Raise :class:`InvalidKeyError` unless ``key`` is an int or a str."""
    if not is_valid_key(key):
        raise InvalidKeyError(key)


def validate_multiple(keys: Iterable[Any]) -> None:
    """Validate every key in input order, failing on the first invalid one."""
    for key in keys:
        if not is_valid_key(key):
            raise InvalidKeyError(key)


def normalize_keys(keys: Union[Iterable[Any], Mapping[Any, Any]]) -> List[Any]:
    """Return the requested keys as a plain list, discarding positions.

    A mapping contributes its values (its own keys are treated as
    positional indices). Duplicates are preserved; batch reads collapse
    them when building the result mapping.
    """
    if isinstance(keys, (str, bytes, bytearray)):
        raise TypeError(f"Expected a collection of keys, got a single {type(keys).__name__}")
    if isinstance(keys, Mapping):
        return list(keys.values())
    return list(keys)


def unique(keys: Iterable[Key]) -> List[Key]:
    """Drop repeated keys while keeping first-occurrence order."""
    return list(dict.fromkeys(keys))


def encode_key(key: Key) -> str:
    """Encode a key as JSON text: ``"a"`` -> ``'"a"'`` and ``1`` -> ``'1'``."""
    validate(key)
    return json.dumps(key, ensure_ascii=False)


def decode_key(text: Union[str, bytes]) -> Key:
    """Reverse :func:`encode_key`. Raises ``ValueError`` on foreign input."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8")
    key = json.loads(text)
    if not is_valid_key(key):
        raise ValueError(f"Not an encoded key: {text!r}")
    return key
