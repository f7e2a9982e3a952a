"""TTL-based result cache with single-flight computation."""

import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, TypeVar

from pydantic import BaseModel

from airdrop_eligibility.data import get_cache_ttl

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheEntry:
    """
    Cache entry with TTL support.

    Parameters
    ----------
    value : Any
        Cached value
    ttl : float
        Time-to-live in seconds
    created_at : float
        Insertion timestamp

    """

    def __init__(self, value: Any, ttl: float, created_at: float) -> None:
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
            True once ``ttl`` seconds have passed since insertion

        """
        return (now - self.created_at) >= self.ttl


class CacheStats(BaseModel):
    """Counters for cache usage."""

    entries: int
    in_flight: int
    hits: int
    misses: int
    coalesced: int

    @property
    def hit_rate(self) -> float:
        """Share of lookups served without a new computation."""
        lookups = self.hits + self.misses + self.coalesced
        return (self.hits + self.coalesced) / lookups if lookups else 0.0


class ResultCache:
    """
    Thread-safe in-memory cache for computed results.

    Entries expire ``ttl`` seconds after insertion and are checked lazily
    on read. :meth:`get_or_compute` runs at most one computation per key at
    a time; concurrent callers for the same key wait for that computation
    and receive its value (or its exception). Failed computations are not
    cached.

    Parameters
    ----------
    default_ttl : float | None
        Default time-to-live in seconds for cache entries. Uses the configured
        ``cache.ttl_seconds`` if None.
    clock : Callable[[], float]
        Wall-clock source in seconds

    """

    def __init__(self, default_ttl: float | None = None, clock: Callable[[], float] = time.time) -> None:
        self.default_ttl = get_cache_ttl() if default_ttl is None else default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, Future] = {}
        self._hits = 0
        self._misses = 0
        self._coalesced = 0

    @staticmethod
    def make_key(namespace: str, *parts: Any) -> str:
        """
        Generate a deterministic cache key.

        Parameters
        ----------
        namespace : str
            Key prefix naming the computation (e.g., 'eligibility')
        *parts : Any
            JSON-serializable key components

        Returns
        -------
        str
            ``"<namespace>:<sha256 of parts>"``

        """
        key_str = json.dumps(parts, sort_keys=True, default=str)
        return f"{namespace}:{hashlib.sha256(key_str.encode()).hexdigest()}"

    def _live_entry(self, key: str, now: float) -> CacheEntry | None:
        """Return the entry if still valid, dropping it if expired. Caller holds the lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(now):
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Any | None:
        """
        Get cached value if it exists and hasn't expired.

        Parameters
        ----------
        key : str
            Cache key

        Returns
        -------
        Any | None
            Cached value if found and valid, None otherwise

        """
        with self._lock:
            entry = self._live_entry(key, self._clock())
            return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """
        Store value in cache, replacing any previous entry.

        Parameters
        ----------
        key : str
            Cache key
        value : Any
            Value to cache
        ttl : float | None
            Time-to-live in seconds. Uses default_ttl if None.

        """
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value, ttl, created_at=self._clock())

    def get_or_compute(self, key: str, ttl: float | None, compute_fn: Callable[[], T]) -> T:
        """
        Return the cached value for ``key`` or compute and store it.

        Parameters
        ----------
        key : str
            Cache key
        ttl : float | None
            Time-to-live in seconds for a newly computed value. Uses default_ttl if None.
        compute_fn : Callable[[], T]
            Computation run on a miss

        Returns
        -------
        T
            Value valid at read time, or the freshly computed value

        Raises
        ------
        Exception
            Whatever ``compute_fn`` raised, for the caller that ran it and every waiter

        """
        ttl = self.default_ttl if ttl is None else ttl

        with self._lock:
            entry = self._live_entry(key, self._clock())
            if entry is not None:
                self._hits += 1
                return entry.value

            flight = self._in_flight.get(key)
            owner = flight is None
            if owner:
                self._misses += 1
                flight = Future()
                self._in_flight[key] = flight
            else:
                self._coalesced += 1

        if not owner:
            logger.debug("Waiting for in-flight computation of %s", key)
            return flight.result()

        try:
            value = compute_fn()
        except BaseException as e:
            with self._lock:
                self._in_flight.pop(key, None)
            flight.set_exception(e)
            raise

        with self._lock:
            self._entries[key] = CacheEntry(value, ttl, created_at=self._clock())
            self._in_flight.pop(key, None)
        flight.set_result(value)
        logger.debug("Computed and cached %s (ttl=%ss)", key, ttl)
        return value

    def invalidate(self, key: str) -> bool:
        """
        Drop a cached entry.

        Returns
        -------
        bool
            True if an entry was removed

        """
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries from cache.

        Returns
        -------
        int
            Number of entries removed

        """
        with self._lock:
            now = self._clock()
            expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._entries[key]
        return len(expired_keys)

    def stats(self) -> CacheStats:
        """Snapshot of cache counters."""
        with self._lock:
            return CacheStats(
                entries=len(self._entries),
                in_flight=len(self._in_flight),
                hits=self._hits,
                misses=self._misses,
                coalesced=self._coalesced,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
