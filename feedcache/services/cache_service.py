"""
Feed cache service: the public cache API and its wiring.

One ``FeedCacheService`` is built per process (see ``build_cache_service``)
and handed to whoever needs it; ``start``/``stop`` tie event subscriptions
and the cleanup schedule to the process lifecycle.
"""
import logging
import time
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from feedcache.cache.namespace import CacheKeyNamespace, DEFAULT_NAMESPACE
from feedcache.cache.ttl_cache import TTLCache
from feedcache.config.settings import CacheConfig, SITE_URL, WARM_TIMEOUT
from feedcache.services.event_bus import EventBus
from feedcache.services.invalidation_service import InvalidationRouter
from feedcache.services.scheduler import CLEANUP_TASK_NAME, HOURLY, Scheduler
from feedcache.services.stats_service import CacheStats
from feedcache.services.sweeper_service import ExpirySweeper, SweepReport
from feedcache.services.warmer_service import CacheWarmer
from feedcache.tiers import EphemeralTier, MemoryTier, PersistentTier, TierRegistry

logger = logging.getLogger(__name__)


class FeedCacheService:
    """Facade over the cache engine, invalidation, sweeping, stats and warming."""

    def __init__(
        self,
        cache: TTLCache,
        config: CacheConfig,
        router: InvalidationRouter,
        sweeper: ExpirySweeper,
        stats: CacheStats,
        warmer: CacheWarmer,
        bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.cache = cache
        self.config = config
        self.router = router
        self.sweeper = sweeper
        self.stats = stats
        self.warmer = warmer
        self.bus = bus
        self.scheduler = scheduler
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Subscribe to content events and register the hourly cleanup once."""
        if self._started:
            return
        if self.bus is not None:
            self.router.attach(self.bus)
        if self.scheduler is not None and not self.scheduler.is_scheduled(CLEANUP_TASK_NAME):
            self.scheduler.schedule(CLEANUP_TASK_NAME, HOURLY, self.cleanup_expired)
        self._started = True
        logger.info("Feed cache service started")

    def stop(self, clear_cache: bool = False) -> None:
        """
        Undo ``start``.

        Args:
            clear_cache: Also drop every cached entry (used when the feature
                is being switched off, not on an ordinary shutdown)
        """
        if self.bus is not None:
            self.router.detach(self.bus)
        if self.scheduler is not None:
            self.scheduler.unschedule(CLEANUP_TASK_NAME)
        if clear_cache:
            self.cache.clear_all()
        self._started = False
        logger.info("Feed cache service stopped")

    # Cache operations

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Store ``value``; the TTL defaults to the configured cache duration."""
        if ttl_seconds is None:
            ttl_seconds = self.get_cache_duration()
        return self.cache.set(key, value, ttl_seconds)

    def get(self, key: str, default: Any = None) -> Any:
        return self.cache.get(key, default)

    def delete(self, key: str) -> bool:
        return self.cache.delete(key)

    def clear_all(self) -> int:
        return self.cache.clear_all()

    def set_with_fallback(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        if ttl_seconds is None:
            ttl_seconds = self.get_cache_duration()
        return self.cache.set_with_fallback(key, value, ttl_seconds)

    def get_with_fallback(self, key: str, default: Any = None) -> Any:
        return self.cache.get_with_fallback(key, default)

    def clear_feed_cache(self, content_id: Optional[Any] = None) -> int:
        return self.router.invalidate(content_id)

    # Maintenance

    def sweep(self) -> SweepReport:
        return self.sweeper.sweep()

    def cleanup_expired(self) -> int:
        """Reclaim expired entries. Returns how many were removed."""
        return self.sweep().reclaimed

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.stats.collect()

    def warm_cache(self) -> int:
        return self.warmer.warm()

    # Settings

    def is_caching_enabled(self) -> bool:
        return self.config.is_caching_enabled()

    def get_cache_duration(self) -> int:
        return self.config.get_cache_duration()


def build_cache_service(
    session_factory: Optional[Callable[[], Session]] = None,
    config: Optional[CacheConfig] = None,
    bus: Optional[EventBus] = None,
    scheduler: Optional[Scheduler] = None,
    namespace: CacheKeyNamespace = DEFAULT_NAMESPACE,
    site_url: str = SITE_URL,
    http_get: Optional[Callable[..., object]] = None,
    clock: Callable[[], float] = time.time,
) -> FeedCacheService:
    """
    Wire the default service: persistent -> ephemeral -> memory tiers.

    Args:
        session_factory: Session factory for the options table
            (defaults to ``SessionLocal``)
        config: Settings reader (defaults to one over the same table)
        bus: Event bus to subscribe the invalidation router to on ``start``
        scheduler: Scheduler to register the hourly cleanup with on ``start``
        namespace: Well-known key registry
        site_url: Site root used to build feed URLs for warming
        http_get: ``requests.get``-compatible callable for warming
        clock: Epoch-seconds clock shared by the cache and its tiers

    Returns:
        An unstarted FeedCacheService
    """
    if session_factory is None:
        from feedcache.db.database import SessionLocal
        session_factory = SessionLocal
    config = config or CacheConfig(session_factory)

    registry = TierRegistry()
    registry.register(PersistentTier(session_factory))
    registry.register(EphemeralTier(clock=clock))
    registry.register(MemoryTier())

    cache = TTLCache(registry, namespace=namespace, default_ttl=config.cache_duration, clock=clock)
    warmer = CacheWarmer(
        site_url=site_url,
        custom_post_types=config.get_custom_post_types,
        timeout=WARM_TIMEOUT,
        http_get=http_get,
    )

    return FeedCacheService(
        cache=cache,
        config=config,
        router=InvalidationRouter(cache),
        sweeper=ExpirySweeper(cache),
        stats=CacheStats(cache),
        warmer=warmer,
        bus=bus,
        scheduler=scheduler,
    )
