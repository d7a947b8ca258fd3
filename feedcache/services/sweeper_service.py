"""Periodic reclamation of expired cache entries."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from feedcache.cache.entry import CacheEntry
from feedcache.cache.exceptions import StorageUnavailable
from feedcache.cache.ttl_cache import TTLCache
from feedcache.tiers.base import StorageTier

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    reclaimed: int = 0
    failed: int = 0
    per_tier: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def as_dict(self) -> Dict[str, Any]:
        return {"reclaimed": self.reclaimed, "failed": self.failed, "per_tier": dict(self.per_tier)}


class ExpirySweeper:
    """
    Deletes expired entries from every tier.

    Stateless and idempotent: it probes the cache's candidate keys on each
    tier, so two passes with no writes in between reclaim nothing the second
    time. Entries on tiers without expiry metadata are always reclaimable.
    A failing entry is logged and counted, and the pass moves on.
    """

    def __init__(self, cache: TTLCache):
        self.cache = cache

    def sweep(self) -> SweepReport:
        report = SweepReport()
        now = self.cache.now()

        for tier in self.cache.tiers:
            reclaimed = 0
            for storage_key in self.cache.candidate_keys(tier):
                try:
                    entry = tier.read(storage_key)
                    if entry is None or not self._is_reclaimable(tier, entry, now):
                        continue
                    if tier.remove(storage_key):
                        reclaimed += 1
                except StorageUnavailable as e:
                    report.failed += 1
                    logger.warning(f"Sweep skipped {storage_key} on {tier.name} tier: {e}")
            report.per_tier[tier.name] = reclaimed
            report.reclaimed += reclaimed

        logger.info(f"Cache sweep reclaimed {report.reclaimed} entries ({report.failed} failures)")
        return report

    @staticmethod
    def _is_reclaimable(tier: StorageTier, entry: CacheEntry, now: float) -> bool:
        if not tier.tracks_expiry:
            return True
        return entry.is_expired(now)
