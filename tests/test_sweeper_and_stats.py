"""Unit tests for the expiry sweeper and cache statistics."""
from conftest import FakeClock, FailingTier
from feedcache.cache import CacheEntry, estimate_size
from feedcache.cache.ttl_cache import TTLCache
from feedcache.services.stats_service import CacheStats
from feedcache.services.sweeper_service import ExpirySweeper
from feedcache.tiers import EphemeralTier, MemoryTier, PersistentTier


class TestExpirySweeper:
    """Test sweeping expired entries across tiers."""

    def setup_method(self):
        self.clock = FakeClock()
        self.persistent = PersistentTier()
        self.ephemeral = EphemeralTier(clock=self.clock)
        self.memory = MemoryTier()
        self.cache = TTLCache([self.persistent, self.ephemeral, self.memory], clock=self.clock)
        self.sweeper = ExpirySweeper(self.cache)

    def _put(self, tier, key, ttl):
        tier.write(tier.storage_key(key), CacheEntry.create(key, "<xml/>", ttl, self.clock()))

    def test_sweep_empty_cache(self):
        report = self.sweeper.sweep()
        assert report.reclaimed == 0
        assert report.failed == 0
        assert report.ok

    def test_only_expired_entries_are_reclaimed(self):
        self.cache.set("feed_cache_7", "stale", 60)
        self.cache.set("analytics_summary", "fresh", 3600)
        self.cache.set("adhoc-key", "stale", 60)
        self.clock.advance(120)

        report = self.sweeper.sweep()

        assert report.reclaimed == 2
        assert report.per_tier["persistent"] == 2
        assert self.cache.get("analytics_summary") == "fresh"

    def test_ephemeral_entries_are_always_eligible(self):
        """Test tiers without expiry metadata get swept regardless of TTL."""
        self._put(self.ephemeral, "feed_cache", 3600)
        report = self.sweeper.sweep()
        assert report.per_tier["ephemeral"] == 1

    def test_each_tier_counts_independently(self):
        self._put(self.persistent, "feed_cache", 10)
        self._put(self.memory, "feed_cache", 10)
        self.clock.advance(11)

        report = self.sweeper.sweep()

        assert report.reclaimed == 2
        assert report.per_tier == {"persistent": 1, "ephemeral": 0, "memory": 1}

    def test_second_sweep_reclaims_nothing(self):
        self.cache.set("feed_cache", "stale", 10)
        self._put(self.ephemeral, "footer_cache", 3600)
        self._put(self.memory, "scanned-only", 10)
        self.clock.advance(11)

        assert self.sweeper.sweep().reclaimed == 3
        assert self.sweeper.sweep().reclaimed == 0

    def test_failing_tier_does_not_abort_sweep(self):
        failing = FailingTier()
        cache = TTLCache([failing, self.memory], clock=self.clock)
        self._put(self.memory, "feed_cache", 10)
        self.clock.advance(11)

        report = ExpirySweeper(cache).sweep()

        assert report.reclaimed == 1
        assert report.failed == len(cache.namespace)
        assert not report.ok


class TestCacheStats:
    """Test cache statistics."""

    def setup_method(self):
        self.clock = FakeClock()
        self.ephemeral = EphemeralTier(clock=self.clock)
        self.cache = TTLCache([PersistentTier(), self.ephemeral, MemoryTier()], clock=self.clock)
        self.stats = CacheStats(self.cache)

    def test_empty_cache(self):
        assert self.stats.collect() == {
            "total_entries": 0,
            "expired_entries": 0,
            "active_entries": 0,
            "cache_size_bytes": 0,
            "cache_size_mb": 0.0,
        }

    def test_counts_active_and_expired(self):
        self.cache.set("feed_cache", "<rss/>", 60)
        self.cache.set("performance_stats_30", {"avg_ms": 12}, 3600)
        self.clock.advance(61)

        stats = self.stats.collect()

        assert stats["total_entries"] == 2
        assert stats["expired_entries"] == 1
        assert stats["active_entries"] == 1
        assert stats["cache_size_bytes"] == estimate_size("<rss/>") + estimate_size({"avg_ms": 12})

    def test_ephemeral_entries_count_as_active(self):
        self.ephemeral.write(
            self.ephemeral.storage_key("footer_cache"),
            CacheEntry.create("footer_cache", "<footer/>", 60, self.clock()),
        )
        stats = self.stats.collect()
        assert stats["total_entries"] == 1
        assert stats["active_entries"] == 1

    def test_size_reported_in_megabytes(self):
        self.cache.set("feed_cache", "x" * (3 * 1024 * 1024), 60)
        assert self.stats.collect()["cache_size_mb"] == 3.0

    def test_size_estimate_grows_with_payload(self):
        assert estimate_size("a" * 10) < estimate_size("a" * 11)
        assert estimate_size(object()) > 0

    def test_expired_entry_not_active_after_get(self):
        """Test stats stop counting an entry once it expired and was read."""
        self.cache.set("feedA", "<xml/>", 60)
        assert self.cache.get("feedA") == "<xml/>"
        assert self.stats.collect()["active_entries"] == 1

        self.clock.advance(61)
        assert self.cache.get("feedA") is None
        stats = self.stats.collect()
        assert stats["active_entries"] == 0
        assert stats["total_entries"] == 0
