"""In-memory result caching with TTL and single-flight semantics."""

from airdrop_eligibility.cache.result_cache import CacheEntry, CacheStats, ResultCache

__all__ = [
    "CacheEntry",
    "CacheStats",
    "ResultCache",
]
