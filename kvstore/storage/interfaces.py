from typing import Any, Dict, Iterable, List, Protocol, Union, runtime_checkable


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    """Store protocol mirroring `kvstore.storage.base.KeyValueStore`.

    Implementations should follow the semantics documented on the abstract
    base class in `kvstore.storage.base` (NoSuchKeyError for missing keys in
    the *_or_fail variants, key validation before I/O, etc.).
    """

    def set(self, key: Union[int, str], value: Any) -> None: ...

    def get(self, key: Union[int, str], default: Any = None) -> Any: ...

    def get_or_fail(self, key: Union[int, str]) -> Any: ...

    def get_multiple(self, keys: Iterable[Union[int, str]], default: Any = None) -> Dict[Union[int, str], Any]: ...

    def get_multiple_or_fail(self, keys: Iterable[Union[int, str]]) -> Dict[Union[int, str], Any]: ...

    def remove(self, key: Union[int, str]) -> bool: ...

    def exists(self, key: Union[int, str]) -> bool: ...

    def clear(self) -> None: ...

    def keys(self) -> List[Union[int, str]]: ...


@runtime_checkable
class CountableStoreProtocol(KeyValueStoreProtocol, Protocol):
    def count(self) -> int: ...


@runtime_checkable
class SortableStoreProtocol(KeyValueStoreProtocol, Protocol):
    def sort(self, flags: int = 0) -> None: ...
