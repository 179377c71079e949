"""Cache layer with TTL expiry, request coalescing and LRU eviction."""

from defi_adapters.cache.fetch_cache import CacheConfig, CacheEntry, FetchCache

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "FetchCache",
]
