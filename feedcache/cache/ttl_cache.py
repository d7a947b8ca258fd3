"""Time-To-Live (TTL) cache over an ordered chain of storage tiers."""
import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Union

from feedcache.cache.entry import CacheEntry, MISSING
from feedcache.cache.exceptions import StorageUnavailable
from feedcache.cache.namespace import CacheKeyNamespace, DEFAULT_NAMESPACE
from feedcache.tiers.base import StorageTier
from feedcache.tiers.registry import TierRegistry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


class TTLCache:
    """
    Cache with per-entry time-to-live (TTL) expiry and tier fallback.

    Entries are written to the primary (first) tier; ``set_with_fallback``
    and ``get_with_fallback`` walk the remaining tiers in order. Expired
    entries are never returned and are deleted when a read finds them.
    Storage failures never escape: writes report False, reads report a miss.

    Attributes:
        namespace: Well-known keys probed by clear/sweep/stats
        default_ttl: TTL used when ``set`` is called without one

    Example:
        >>> cache = TTLCache([MemoryTier()])
        >>> cache.set("feed:rss2", "<rss/>", ttl_seconds=300)
        True
        >>> cache.get("feed:rss2")
        '<rss/>'
    """

    def __init__(
        self,
        tiers: Union[TierRegistry, Iterable[StorageTier]],
        namespace: CacheKeyNamespace = DEFAULT_NAMESPACE,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            tiers: Tier chain (registry or sequence); first is primary
            namespace: Well-known key registry
            default_ttl: Default time-to-live in seconds
            clock: Returns current epoch seconds
        """
        self._registry = tiers if isinstance(tiers, TierRegistry) else TierRegistry(tiers)
        if not len(self._registry):
            raise ValueError("TTLCache needs at least one storage tier")
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._clock = clock

    @property
    def tiers(self) -> List[StorageTier]:
        return self._registry.chain()

    @property
    def primary(self) -> StorageTier:
        return self._registry.primary

    @property
    def registry(self) -> TierRegistry:
        return self._registry

    def now(self) -> float:
        return self._clock()

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """
        Store a value in the primary tier.

        Args:
            key: Logical cache key (e.g. "feed_cache_7")
            value: Serializable payload
            ttl_seconds: Time-to-live; ``default_ttl`` when omitted

        Returns:
            False when the primary tier is unavailable, True otherwise

        Raises:
            ValueError: If ``ttl_seconds`` is negative
            TypeError: If the tier cannot serialize ``value``
        """
        return self._write(self.primary, key, value, ttl_seconds)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value from the primary tier if present and not expired.

        An expired entry is deleted before the miss is reported. Pass
        ``default=MISSING`` to tell a miss apart from a cached None.

        Example:
            >>> html = cache.get("footer_cache")
            >>> if html is None:
            ...     print("Cache miss or expired")
        """
        return self._read(self.primary, key, default)

    def delete(self, key: str) -> bool:
        """
        Remove an entry from the primary tier.

        Returns:
            True if an entry was removed; False if it was absent or the
            tier failed
        """
        tier = self.primary
        return self._remove(tier, tier.storage_key(key))

    def set_with_fallback(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Write to the first tier in the chain that accepts the entry."""
        for tier in self.tiers:
            if self._write(tier, key, value, ttl_seconds):
                if tier is not self.primary:
                    logger.info(f"Stored '{key}' in fallback {tier.name} tier")
                return True
        return False

    def get_with_fallback(self, key: str, default: Any = None) -> Any:
        """Return the first live hit walking the chain from the primary tier."""
        for tier in self.tiers:
            value = self._read(tier, key, MISSING)
            if value is not MISSING:
                return value
        return default

    def clear_all(self) -> int:
        """
        Remove every known entry from every tier.

        Deletes the namespace keys on all tiers and, on tiers that can list
        their keys, everything under the tier prefix. Flushable tiers are then
        emptied wholesale. Entries with unknown keys on tiers that cannot list
        keys survive until they expire.

        Returns:
            Number of entries removed (flushed entries are not counted)
        """
        removed = 0
        failed = 0
        for tier in self.tiers:
            for storage_key in self.candidate_keys(tier):
                try:
                    if tier.remove(storage_key):
                        removed += 1
                except StorageUnavailable as e:
                    failed += 1
                    logger.warning(f"Could not clear {storage_key} on {tier.name} tier: {e}")
            if tier.supports_flush:
                tier.flush_all()

        logger.info(f"Cleared {removed} cache entries ({failed} failures)")
        return removed

    def candidate_keys(self, tier: StorageTier) -> List[str]:
        """
        Storage keys worth probing on ``tier``.

        Namespace keys under the tier's key transform, plus the tier's own
        key listing when it supports prefix scans. Deduplicated, in order.
        """
        keys = [tier.storage_key(key) for key in self.namespace.keys()]
        if tier.supports_scan:
            try:
                keys.extend(tier.iter_keys(tier.key_prefix))
            except StorageUnavailable as e:
                logger.warning(f"Could not list keys on {tier.name} tier: {e}")
        return list(dict.fromkeys(keys))

    def _write(self, tier: StorageTier, key: str, value: Any, ttl_seconds: Optional[int]) -> bool:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        entry = CacheEntry.create(key, value, ttl, self.now())
        try:
            return tier.write(tier.storage_key(key), entry)
        except StorageUnavailable as e:
            logger.error(f"Cache write for '{key}' failed on {tier.name} tier: {e}")
            return False

    def _read(self, tier: StorageTier, key: str, default: Any) -> Any:
        storage_key = tier.storage_key(key)
        try:
            entry = tier.read(storage_key)
        except StorageUnavailable as e:
            logger.warning(f"Cache read for '{key}' failed on {tier.name} tier: {e}")
            return default

        if entry is None:
            return default

        if entry.is_expired(self.now()):
            # Expired, remove and report a miss
            self._remove(tier, storage_key)
            return default

        return entry.value

    def _remove(self, tier: StorageTier, storage_key: str) -> bool:
        try:
            return tier.remove(storage_key)
        except StorageUnavailable as e:
            logger.warning(f"Cache delete of {storage_key} failed on {tier.name} tier: {e}")
            return False
