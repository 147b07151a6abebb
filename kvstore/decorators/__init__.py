from kvstore.decorators.base import AbstractDecorator
from kvstore.decorators.cached import CachedStore
from kvstore.decorators.countable import CountableDecorator
from kvstore.decorators.sortable import SortableDecorator

__all__ = [
    "AbstractDecorator",
    "CachedStore",
    "CountableDecorator",
    "SortableDecorator",
]
