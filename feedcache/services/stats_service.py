"""Cache size and expiry statistics."""
import logging
from typing import Any, Dict

from feedcache.cache.exceptions import StorageUnavailable
from feedcache.cache.ttl_cache import TTLCache

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class CacheStats:
    """Counts and sizes the entries reachable through the cache's candidate keys."""

    def __init__(self, cache: TTLCache):
        self.cache = cache

    def collect(self) -> Dict[str, Any]:
        """
        Probe every tier and summarize what is stored.

        Returns:
            Dict with total_entries, expired_entries, active_entries,
            cache_size_bytes and cache_size_mb (2 decimals)
        """
        total_entries = 0
        expired_entries = 0
        size_bytes = 0
        now = self.cache.now()

        for tier in self.cache.tiers:
            for storage_key in self.cache.candidate_keys(tier):
                try:
                    entry = tier.read(storage_key)
                except StorageUnavailable as e:
                    logger.warning(f"Stats skipped {storage_key} on {tier.name} tier: {e}")
                    continue
                if entry is None:
                    continue

                total_entries += 1
                size_bytes += entry.size_bytes()
                if entry.is_expired(now):
                    expired_entries += 1

        return {
            "total_entries": total_entries,
            "expired_entries": expired_entries,
            "active_entries": max(0, total_entries - expired_entries),
            "cache_size_bytes": size_bytes,
            "cache_size_mb": round(size_bytes / BYTES_PER_MB, 2),
        }
