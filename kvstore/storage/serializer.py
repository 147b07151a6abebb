"""Serialize/deserialize Python values for backends that store bytes.

Every serializer raises :class:`SerializationError` when a value cannot be
encoded and :class:`DeserializationError` when stored data cannot be
decoded; the decoder's own exception message is carried as the reason and
chained as ``__cause__``.
"""
from __future__ import annotations

import io
import json
import pickle
import socket
from typing import Any, Optional, Protocol

import yaml

from kvstore.errors import DeserializationError, SerializationError

# Fixed so that data written by one interpreter stays readable by another.
PICKLE_PROTOCOL = 5


class Serializer(Protocol):
    """Symmetric codec: `dump` -> bytes, `load` <- bytes."""

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


def _reason(exc: BaseException) -> str:
    msg = str(exc)
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__


def _require_bytes(data: Any) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise DeserializationError.for_value(data, "expected a byte sequence")


class PickleSerializer:
    """Default serializer using pickle (binary).

    Stored values may be arbitrary Python objects, including objects with
    private attributes and byte strings containing NUL bytes; pickle
    round-trips all of them exactly. Only load data from trusted stores:
    unpickling can execute code.
    """

    def __init__(self, protocol: int = PICKLE_PROTOCOL) -> None:
        self.protocol = protocol

    def dump(self, value: Any) -> bytes:
        if isinstance(value, (io.IOBase, socket.socket)):
            raise SerializationError.for_value(value, "open resource handles cannot be serialized")
        try:
            return pickle.dumps(value, protocol=self.protocol)
        except Exception as exc:
            raise SerializationError.for_value(value, _reason(exc)) from exc

    def load(self, data: bytes) -> Any:
        raw = _require_bytes(data)
        try:
            return pickle.loads(raw)
        except Exception as exc:
            raise DeserializationError.for_value(raw, _reason(exc)) from exc


class JSONSerializer:
    """Serializer using JSON (text). Rejects values JSON cannot represent."""

    def dump(self, value: Any) -> bytes:
        try:
            return json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializationError.for_value(value, _reason(exc)) from exc

    def load(self, data: bytes) -> Any:
        raw = _require_bytes(data)
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            raise DeserializationError.for_value(raw, _reason(exc)) from exc


class YAMLSerializer:
    """Serializer using YAML (text), restricted to the safe subset."""

    def dump(self, value: Any) -> bytes:
        try:
            return yaml.safe_dump(value, allow_unicode=True).encode("utf-8")
        except yaml.YAMLError as exc:
            raise SerializationError.for_value(value, _reason(exc)) from exc

    def load(self, data: bytes) -> Any:
        raw = _require_bytes(data)
        try:
            return yaml.safe_load(raw.decode("utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise DeserializationError.for_value(raw, _reason(exc)) from exc


class EncryptedSerializer:
    """Serializer that encrypts payloads using Fernet (symmetric, authenticated).

    Notes:
    - Provide either `key` (a Fernet key) or `password`. With a password,
      every payload carries a random salt and the PBKDF2 iteration count so
      the loader can derive the key again.
    - `base_serializer` turns values into bytes before encryption and
      defaults to pickle so any storable value can be encrypted.
    - A wrong key or a tampered frame raises `DeserializationError`.
    """

    def __init__(
        self,
        *,
        key: bytes | None = None,
        password: str | None = None,
        iterations: int = 390000,
        base_serializer: Serializer | None = None,
    ) -> None:
        if key is None and password is None:
            raise ValueError("EncryptedSerializer requires either `key` or `password`")
        self._key = key
        self._password = password
        self._iterations = iterations
        self.base_serializer = base_serializer or PickleSerializer()

    @staticmethod
    def generate_key() -> bytes:
        from cryptography.fernet import Fernet

        return Fernet.generate_key()

    def _derive_key(self, password: str, salt: bytes, iterations: int) -> bytes:
        import base64
        from cryptography.hazmat.primitives import hashes
        from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))

    def dump(self, value: Any) -> bytes:
        """Serialize and encrypt value, returning a framed JSON blob."""
        import base64
        import os
        from cryptography.fernet import Fernet

        inner = self.base_serializer.dump(value)

        if self._password is not None:
            salt = os.urandom(16)
            key = self._derive_key(self._password, salt, self._iterations)
            ct = Fernet(key).encrypt(inner)
            frame = {
                "v": 1,
                "mode": "password",
                "kdf": "pbkdf2",
                "iterations": self._iterations,
                "salt": base64.urlsafe_b64encode(salt).decode("ascii"),
                "ct": base64.urlsafe_b64encode(ct).decode("ascii"),
            }
        else:
            ct = Fernet(self._key).encrypt(inner)
            frame = {"v": 1, "mode": "key", "ct": base64.urlsafe_b64encode(ct).decode("ascii")}
        return json.dumps(frame).encode("utf-8")

    def load(self, data: bytes) -> Any:
        """Parse framed blob, derive key if needed, decrypt and deserialize."""
        import base64
        from cryptography.fernet import Fernet, InvalidToken

        raw = _require_bytes(data)
        try:
            frame = json.loads(raw.decode("utf-8"))
            mode = frame.get("mode")
            ct = base64.urlsafe_b64decode(frame["ct"].encode("ascii"))
            if mode == "password":
                if self._password is None:
                    raise ValueError("serializer was not configured with a password")
                salt = base64.urlsafe_b64decode(frame["salt"].encode("ascii"))
                iterations = frame.get("iterations", self._iterations)
                key = self._derive_key(self._password, salt, iterations)
            elif mode == "key":
                if self._key is None:
                    raise ValueError("serializer was not configured with a key")
                key = self._key
            else:
                raise ValueError("unknown frame format")
            plaintext = Fernet(key).decrypt(ct)
        except InvalidToken as exc:
            raise DeserializationError.for_value(raw, "invalid key or corrupted payload") from exc
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise DeserializationError.for_value(raw, _reason(exc)) from exc
        return self.base_serializer.load(plaintext)


_default = PickleSerializer()


def serialize(value: Any) -> bytes:
    """Serialize a value with the default pickle serializer."""
    return _default.dump(value)


def deserialize(data: bytes) -> Any:
    """Deserialize bytes produced by :func:`serialize`."""
    return _default.load(data)


def get_serializer(name: str = "pickle", *, key: Optional[bytes] = None,
                   password: Optional[str] = None) -> Serializer:
    """Return a serializer instance by name."""
    name = (name or "pickle").lower()
    if name == "pickle":
        return PickleSerializer()
    if name == "json":
        return JSONSerializer()
    if name == "yaml":
        return YAMLSerializer()
    if name == "encrypted":
        return EncryptedSerializer(key=key, password=password)
    raise ValueError(f"Unknown serializer: {name!r}")
