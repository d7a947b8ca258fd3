"""Maps content mutation events to cache invalidation."""
import logging
from typing import Any, Iterable, Optional

from feedcache.cache.cache_key import generate_post_cache_key
from feedcache.cache.ttl_cache import TTLCache
from feedcache.services.event_bus import ContentEvent, EventBus

logger = logging.getLogger(__name__)


class InvalidationRouter:
    """
    Clears the cache whenever content changes.

    A single new post changes "recent posts" feeds, counts and aggregates
    alike, so every event clears the whole cache rather than tracking which
    artifacts depend on which item. The item's own entry is dropped as well
    when the event names it.

    Example:
        >>> router = InvalidationRouter(cache)
        >>> router.attach(bus)
        >>> bus.publish(ContentEvent.POST_SAVED, 42)  # clears everything + "post:42"
    """

    def __init__(self, cache: TTLCache, events: Iterable[ContentEvent] = tuple(ContentEvent)):
        self.cache = cache
        self.events = tuple(ContentEvent(e) for e in events)

    def invalidate(self, content_id: Optional[Any] = None) -> int:
        """
        Clear all cached feeds, plus the entry for ``content_id`` if given.

        Returns:
            Number of entries removed
        """
        removed = self.cache.clear_all()
        if content_id is not None:
            if self.cache.delete(generate_post_cache_key(content_id)):
                removed += 1
        logger.info(f"Invalidated feed cache (content_id={content_id}, removed={removed})")
        return removed

    def handle(self, content_id: Optional[Any] = None) -> None:
        self.invalidate(content_id)

    def attach(self, bus: EventBus) -> None:
        for event in self.events:
            bus.subscribe(event, self.handle)

    def detach(self, bus: EventBus) -> None:
        for event in self.events:
            bus.unsubscribe(event, self.handle)
