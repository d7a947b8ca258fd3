"""
Cache warmer.

Requests the site's feeds over HTTP so the normal request path renders and
caches them before real readers arrive. The warmer never writes cache
entries itself, and a failed request only means a later reader pays for
the render.
"""
import logging
import requests
from typing import Callable, List, Optional, Sequence

from feedcache.config.settings import SITE_URL, WARM_TIMEOUT, WARM_USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_FEED = "rss2"
FEED_TYPES = ("rss2", "atom", "rdf", "rss")


def get_feed_link(site_url: str, feed_type: str = DEFAULT_FEED) -> str:
    """
    Build the pretty-permalink URL of a feed.

    Example:
        >>> get_feed_link("https://example.com", "rss2")
        "https://example.com/feed/"
        >>> get_feed_link("https://example.com/", "atom")
        "https://example.com/feed/atom/"
    """
    base = site_url.rstrip("/")
    if feed_type == DEFAULT_FEED:
        return f"{base}/feed/"
    return f"{base}/feed/{feed_type}/"


class CacheWarmer:
    """Fires best-effort GET requests at every known feed URL."""

    def __init__(
        self,
        site_url: str = SITE_URL,
        custom_post_types: Optional[Callable[[], Sequence[str]]] = None,
        feed_types: Sequence[str] = FEED_TYPES,
        timeout: float = WARM_TIMEOUT,
        user_agent: str = WARM_USER_AGENT,
        http_get: Optional[Callable[..., object]] = None,
    ):
        """
        Args:
            site_url: Site root the feeds hang off
            custom_post_types: Returns post types with their own feed
            feed_types: Syndication formats to warm
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header identifying the warmer
            http_get: ``requests.get``-compatible callable
        """
        self.site_url = site_url
        self.custom_post_types = custom_post_types or (lambda: ())
        self.feed_types = tuple(feed_types)
        self.timeout = timeout
        self.user_agent = user_agent
        self.http_get = http_get or requests.get

    def feed_urls(self) -> List[str]:
        feeds = list(self.feed_types) + list(self.custom_post_types())
        urls = [get_feed_link(self.site_url, feed) for feed in feeds if feed]
        return list(dict.fromkeys(urls))

    def warm(self) -> int:
        """
        Request every feed URL once.

        Failures of individual requests are logged and skipped.

        Returns:
            Number of requests that completed (any HTTP status)
        """
        warmed = 0
        for url in self.feed_urls():
            try:
                self.http_get(url, timeout=self.timeout, headers={"User-Agent": self.user_agent})
                warmed += 1
            except Exception as e:
                logger.debug(f"Cache warm request to {url} failed: {e}")
        logger.info(f"Cache warmer requested {warmed} feeds")
        return warmed
