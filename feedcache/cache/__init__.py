"""Cache core: entries, key derivation, key namespace and errors.

The engine itself lives in :mod:`feedcache.cache.ttl_cache` (it depends on
:mod:`feedcache.tiers`, which depends on this package).
"""
from .entry import CacheEntry, MISSING, estimate_size
from .exceptions import CacheError, StorageUnavailable
from .cache_key import hash_key, generate_storage_key, generate_post_cache_key
from .namespace import CacheKeyNamespace, DEFAULT_NAMESPACE

__all__ = [
    "CacheEntry",
    "MISSING",
    "estimate_size",
    "CacheError",
    "StorageUnavailable",
    "hash_key",
    "generate_storage_key",
    "generate_post_cache_key",
    "CacheKeyNamespace",
    "DEFAULT_NAMESPACE",
]
