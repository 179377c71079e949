"""TTL-based fetch cache with request coalescing and stale-while-revalidate."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, Generic, TypeVar

from cachetools import Cache, LRUCache

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheConfig:
    """
    Configuration shared by fetch cache instances.

    Parameters
    ----------
    max_entries : int
        Maximum number of stored keys before least-recently-used eviction
    ttl : float
        Time-to-live in seconds for cache entries
    allow_stale : bool
        Serve expired entries while a background refresh runs

    """

    def __init__(
        self,
        max_entries: int = 20,
        ttl: float = 5.0,
        allow_stale: bool = True,
    ) -> None:
        if max_entries < 1:
            msg = f"max_entries must be positive, got {max_entries}"
            raise ValueError(msg)
        self.max_entries = max_entries
        self.ttl = ttl
        self.allow_stale = allow_stale


class CacheEntry(Generic[V]):
    """
    Cache entry with TTL support.

    Parameters
    ----------
    value : V
        Cached value
    ttl : float
        Time-to-live in seconds
    created_at : float
        Creation timestamp, in the owning cache's clock

    """

    def __init__(self, value: V, ttl: float, created_at: float) -> None:
        self.value = value
        self.ttl = ttl
        self.created_at = created_at

    def is_expired(self, now: float) -> bool:
        """
        Check if cache entry has expired.

        Parameters
        ----------
        now : float
            Current timestamp

        Returns
        -------
        bool
            True if expired, False otherwise

        """
        return (now - self.created_at) > self.ttl


class EntryStore(LRUCache):
    """
    LRU store of cache entries that logs evictions.

    Expiry is left to ``CacheEntry`` so expired entries stay available
    for stale reads until evicted or replaced.

    Parameters
    ----------
    maxsize : int
        Maximum number of stored entries
    name : str
        Label used in log messages

    """

    def __init__(self, maxsize: int, name: str = "") -> None:
        super().__init__(maxsize=maxsize)
        self.name = name

    def popitem(self) -> tuple[Any, CacheEntry[Any]]:
        key, entry = super().popitem()
        logger.debug("%s cache evicted %s", self.name, key)
        return key, entry

    def peek(self, key: Hashable) -> CacheEntry[Any] | None:
        """Get an entry without updating recency."""
        if key not in self:
            return None
        return Cache.__getitem__(self, key)


class FetchCache(Generic[K, V]):
    """
    Bounded in-memory cache that loads missing keys through a fetch method.

    At most one fetch runs per key at any time: concurrent callers for the
    same key await the same task. Expired entries are served while a single
    background refresh replaces them (when ``allow_stale`` is set).

    Parameters
    ----------
    fetch_method : Callable[[K], Awaitable[V | None]]
        Coroutine function loading the value for a key
    config : CacheConfig | None
        Cache configuration. Uses default config if None.
    name : str
        Label used in log messages
    clock : Callable[[], float]
        Time source for entry timestamps

    """

    def __init__(
        self,
        fetch_method: Callable[[K], Awaitable[V | None]],
        config: CacheConfig | None = None,
        *,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.fetch_method = fetch_method
        self.config = config or CacheConfig()
        self.name = name or getattr(fetch_method, "__name__", "fetch")
        self._clock = clock
        self._entries = EntryStore(self.config.max_entries, self.name)
        self._pending: dict[K, asyncio.Task[V | None]] = {}
        # Bumped by clear() so fetches started before it aren't stored
        self._generation = 0

    async def fetch(self, key: K) -> V | None:
        """
        Get the value for a key, loading it if needed.

        Parameters
        ----------
        key : K
            Cache key

        Returns
        -------
        V | None
            Cached or freshly fetched value, None if the fetch method found no data

        Raises
        ------
        Exception
            Whatever the fetch method raised, when no stale value can be served

        """
        # Reading through the store marks the key as most recently used
        entry = self._entries.get(key)

        if entry is not None:
            if not entry.is_expired(self._clock()):
                logger.debug("%s cache hit for %s", self.name, key)
                return entry.value

            if self.config.allow_stale:
                logger.debug("%s cache serving stale value for %s", self.name, key)
                self._start_fetch(key)
                return entry.value

        logger.debug("%s cache miss for %s", self.name, key)
        # Shield so a cancelled caller doesn't cancel the fetch other callers share
        return await asyncio.shield(self._start_fetch(key))

    def peek(self, key: K) -> V | None:
        """
        Get a stored value without fetching or updating recency.

        Parameters
        ----------
        key : K
            Cache key

        Returns
        -------
        V | None
            Stored value (possibly stale), None if absent

        """
        entry = self._entries.peek(key)
        return entry.value if entry is not None else None

    def is_pending(self, key: K) -> bool:
        """Whether a fetch for ``key`` is in flight."""
        return key in self._pending

    def clear(self) -> None:
        """
        Clear all cached entries.

        Fetches already in flight still resolve for their callers, but their
        results are not stored.

        """
        self._entries = EntryStore(self.config.max_entries, self.name)
        self._pending.clear()
        self._generation += 1

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _start_fetch(self, key: K) -> "asyncio.Task[V | None]":
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, self._generation))
            task.add_done_callback(self._retrieve_exception)
            self._pending[key] = task
        return task

    async def _load(self, key: K, generation: int) -> V | None:
        try:
            value = await self.fetch_method(key)
        except Exception as e:
            logger.warning("%s fetch failed for %s: %s", self.name, key, e)
            if generation == self._generation:
                self._entries.pop(key, None)
            raise
        finally:
            if generation == self._generation:
                self._pending.pop(key, None)

        if generation != self._generation:
            logger.debug("%s cache discarding %s fetched before clear", self.name, key)
            return value

        if value is None:
            self._entries.pop(key, None)
            return None

        self._entries[key] = CacheEntry(value, self.config.ttl, self._clock())
        return value

    @staticmethod
    def _retrieve_exception(task: "asyncio.Task[Any]") -> None:
        # Background refreshes may have no awaiting caller
        if not task.cancelled():
            task.exception()
