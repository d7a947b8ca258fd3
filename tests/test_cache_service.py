"""Integration tests for the feed cache service."""
from datetime import datetime

from conftest import FakeClock
from feedcache.cache import generate_post_cache_key
from feedcache.config.settings import CACHE_DURATION_OPTION, CacheConfig
from feedcache.db import crud
from feedcache.db.database import SessionLocal
from feedcache.services.cache_service import FeedCacheService, build_cache_service
from feedcache.services.event_bus import ContentEvent, EventBus
from feedcache.services.scheduler import CLEANUP_TASK_NAME, HOURLY, IntervalScheduler


class TestFeedCacheService:
    """Test the default persistent -> ephemeral -> memory wiring."""

    def setup_method(self):
        self.clock = FakeClock()
        self.bus = EventBus()
        self.scheduler = IntervalScheduler(clock=self.clock)
        self.requested = []
        self.service = build_cache_service(
            session_factory=SessionLocal,
            config=CacheConfig(SessionLocal, enable_caching=True, cache_duration=3600, custom_post_types=()),
            bus=self.bus,
            scheduler=self.scheduler,
            site_url="https://example.com",
            http_get=lambda url, **kwargs: self.requested.append(url),
            clock=self.clock,
        )

    def test_builds_three_tier_chain(self):
        assert isinstance(self.service, FeedCacheService)
        assert self.service.cache.registry.names() == ["persistent", "ephemeral", "memory"]
        assert self.service.started is False

    def test_set_get_and_expiry(self):
        """Test a feed cached for 60s is served until it expires."""
        assert self.service.set("feedA", "<rss/>", 60) is True
        self.clock.advance(59)
        assert self.service.get("feedA") == "<rss/>"
        self.clock.advance(2)
        assert self.service.get("feedA") is None

    def test_set_defaults_to_configured_duration(self, session_factory):
        with session_factory() as db:
            crud.update_option(db, CACHE_DURATION_OPTION, 120)

        self.service.set("feed_cache", "<rss/>")
        self.clock.advance(119)
        assert self.service.get("feed_cache") == "<rss/>"
        self.clock.advance(1)
        assert self.service.get("feed_cache") is None

    def test_clear_all_on_empty_cache(self):
        assert self.service.clear_all() == 0
        assert self.service.get_cache_stats()["total_entries"] == 0

    def test_clear_all_then_stats(self):
        self.service.set("feed_cache", "<rss/>", 60)
        self.service.set("footer_cache_7", "<footer/>", 60)
        assert self.service.get_cache_stats()["total_entries"] == 2

        assert self.service.clear_all() == 2
        assert self.service.get_cache_stats()["total_entries"] == 0

    def test_start_is_idempotent(self):
        self.service.start()
        self.service.start()

        assert self.service.started is True
        assert self.bus.handlers(ContentEvent.POST_SAVED) == [self.service.router.handle]
        assert self.scheduler.is_scheduled(CLEANUP_TASK_NAME)

    def test_content_event_invalidates_after_start(self):
        self.service.start()
        self.service.set("feed_cache", "<rss/>", 3600)
        self.service.set(generate_post_cache_key(9), "<item/>", 3600)

        self.bus.publish(ContentEvent.POST_SAVED, 9)

        assert self.service.get("feed_cache") is None
        assert self.service.get(generate_post_cache_key(9)) is None

    def test_stop_unsubscribes_and_unschedules(self):
        self.service.start()
        self.service.set("feed_cache", "<rss/>", 3600)
        self.service.stop()

        assert self.service.started is False
        assert self.bus.handlers(ContentEvent.POST_SAVED) == []
        assert not self.scheduler.is_scheduled(CLEANUP_TASK_NAME)
        assert self.service.get("feed_cache") == "<rss/>"

    def test_stop_can_clear_cache(self):
        self.service.start()
        self.service.set("feed_cache", "<rss/>", 3600)
        self.service.stop(clear_cache=True)
        assert self.service.get("feed_cache") is None

    def test_scheduled_cleanup_reclaims_expired_entries(self):
        self.service.start()
        self.scheduler.run_pending()

        self.service.set("feed_cache", "<rss/>", 60)
        self.service.set("analytics_summary", {"views": 3}, 2 * HOURLY)
        self.clock.advance(HOURLY)

        assert self.scheduler.run_pending() == 1
        stats = self.service.get_cache_stats()
        assert stats["total_entries"] == 1
        assert stats["expired_entries"] == 0

    def test_cleanup_is_monotonic(self):
        self.service.set("feed_cache", "<rss/>", 60)
        self.clock.advance(61)
        assert self.service.cleanup_expired() == 1
        assert self.service.cleanup_expired() == 0

    def test_clear_feed_cache_for_content(self):
        self.service.set(generate_post_cache_key(3), "<item/>", 3600)
        self.service.set("feed_cache", "<rss/>", 3600)
        assert self.service.clear_feed_cache(3) == 2

    def test_fallback_round_trip(self):
        assert self.service.set_with_fallback("feedB", "<atom/>") is True
        assert self.service.get_with_fallback("feedB") == "<atom/>"

    def test_warm_cache_requests_feeds(self):
        assert self.service.warm_cache() == 4
        assert self.requested[0] == "https://example.com/feed/"

    def test_settings_passthrough(self):
        assert self.service.is_caching_enabled() is True
        assert self.service.get_cache_duration() == 3600


class TestPayloadRoundTrip:
    """Test values come back from the default chain exactly as stored."""

    def setup_method(self):
        self.clock = FakeClock()
        self.service = build_cache_service(
            session_factory=SessionLocal,
            config=CacheConfig(SessionLocal, enable_caching=True, cache_duration=3600, custom_post_types=()),
            clock=self.clock,
        )

    def test_bytes(self):
        assert self.service.set("feedA", b"<xml/>", 60) is True
        assert self.service.get("feedA") == b"<xml/>"

    def test_tuples_and_int_dict_keys(self):
        assert self.service.set("feedB", {"items": (1, 2), 7: "x"}, 60) is True

        cached = self.service.get("feedB")
        assert cached == {"items": (1, 2), 7: "x"}
        assert isinstance(cached["items"], tuple)

    def test_datetimes(self):
        assert self.service.set("feedC", {"built": datetime(2024, 1, 1)}, 60) is True
        assert self.service.get("feedC") == {"built": datetime(2024, 1, 1)}

    def test_round_trip_survives_new_service(self):
        """Test a fresh process reads the same value from the options table."""
        self.service.set("feed_cache", ("<rss/>", b"\x00\x01"), 60)
        other = build_cache_service(session_factory=SessionLocal, clock=self.clock)
        assert other.get("feed_cache") == ("<rss/>", b"\x00\x01")

    def test_stats_count_binary_payloads(self):
        self.service.set("feed_cache", b"<rss/>", 60)
        stats = self.service.get_cache_stats()
        assert stats["total_entries"] == 1
        assert stats["cache_size_bytes"] > 0
