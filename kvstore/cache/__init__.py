from kvstore.cache.interfaces import Cache
from kvstore.cache.memory_cache import MemoryCache

__all__ = ["Cache", "MemoryCache"]
