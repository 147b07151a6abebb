from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Cache(Protocol):
    """Minimal cache contract consumed by `CachedStore`.

    `fetch` returns `default` for absent or expired entries; a hit and its
    value are decided in the same call. `ttl` is the lifetime in seconds;
    ``None`` or ``0`` means the entry never expires.
    """

    def contains(self, key: str) -> bool: ...

    def fetch(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any, ttl: Optional[float] = None) -> None: ...

    def delete(self, key: str) -> bool: ...
