"""Error taxonomy shared by every store, serializer and decorator.

Each error is built from the dynamic fields it reports; messages are
composed at construction time so no template state is shared between
error classes.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional


def type_name(value: Any) -> str:
    """Return the runtime type name used in error messages."""
    if value is None:
        return "NoneType"
    cls = type(value)
    if cls.__module__ in ("builtins", "__builtin__"):
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


class KeyValueStoreError(Exception):
    """Base exception for all key-value store errors."""


class InvalidKeyError(KeyValueStoreError, TypeError):
    """Raised when a key is neither an integer nor a string."""

    def __init__(self, key: Any) -> None:
        self.key = key
        self.type_name = type_name(key)
        super().__init__(f"Expected a key of type integer or string. Got: {self.type_name}")


class NoSuchKeyError(KeyValueStoreError, KeyError):
    """Raised when one or more requested keys are absent."""

    def __init__(self, keys: Iterable[Any], message: Optional[str] = None) -> None:
        self.keys: List[Any] = list(keys)
        if message is None:
            if len(self.keys) == 1:
                message = f'The key "{self.keys[0]}" does not exist.'
            else:
                joined = '", "'.join(str(k) for k in self.keys)
                message = f'The keys "{joined}" do not exist.'
        self.message = message
        super().__init__(message)

    @classmethod
    def for_key(cls, key: Any) -> "NoSuchKeyError":
        return cls([key])

    @classmethod
    def for_keys(cls, keys: Iterable[Any]) -> "NoSuchKeyError":
        return cls(keys)

    @property
    def key(self) -> Any:
        return self.keys[0] if self.keys else None

    def __str__(self) -> str:
        # KeyError renders its argument with repr(); keep the plain message
        return self.message


class _ValueTypeError(KeyValueStoreError, ValueError):
    """Common shape of the (de)serialization errors."""

    action = "process"

    def __init__(self, type_name: str, reason: str = "") -> None:
        self.type_name = type_name
        self.reason = reason
        suffix = f": {reason}" if reason else "."
        super().__init__(f"Could not {self.action} value of type {type_name}{suffix}")

    @classmethod
    def for_value(cls, value: Any, reason: str = ""):
        return cls(type_name(value), reason)

    @classmethod
    def for_type(cls, name: str, reason: str = ""):
        return cls(name, reason)


class SerializationError(_ValueTypeError):
    """Raised when a value cannot be converted into its stored form."""

    action = "serialize"


class DeserializationError(_ValueTypeError):
    """Raised when stored data cannot be converted back into a value.

    Usually indicates corrupted data or a format mismatch; never retried.
    """

    action = "deserialize"


class UnsupportedValueError(KeyValueStoreError, ValueError):
    """Raised when a backend cannot hold a well-formed value."""

    @classmethod
    def for_type(cls, name: str, store: Any) -> "UnsupportedValueError":
        return cls(f"Values of type {name} are not supported by {type(store).__name__}.")

    @classmethod
    def for_value(cls, value: Any, store: Any) -> "UnsupportedValueError":
        return cls.for_type(type_name(value), store)


class _BackendError(KeyValueStoreError):
    verb = "access"

    @classmethod
    def for_exception(cls, exc: BaseException):
        detail = str(exc) or type(exc).__name__
        return cls(f"Could not {cls.verb} key-value store: {detail}")


class ReadError(_BackendError):
    """Raised when the backend cannot be read. Wraps the native failure."""

    verb = "read"


class WriteError(_BackendError):
    """Raised when the backend cannot be written. Wraps the native failure."""

    verb = "write"


class ConfigurationError(KeyValueStoreError, ValueError):
    """Raised when a store, decorator or config file is misconfigured."""
