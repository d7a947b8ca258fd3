"""
Cache configuration.

Environment variables (optionally from a .env file) provide the defaults;
values saved in the options table override them at runtime, the same way
the admin screen of the host stores its settings.
"""
import logging
import os
from typing import Any, Callable, List, Optional, Sequence

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from feedcache.db import crud

logger = logging.getLogger(__name__)

load_dotenv()

# Option names in the options table. None of them may start with the
# persistent tier prefix ("feedcache_cache_"), which is scanned on clear.
ENABLE_CACHING_OPTION = "feedcache_enable_caching"
CACHE_DURATION_OPTION = "feedcache_ttl"
CUSTOM_POST_TYPES_OPTION = "feedcache_custom_post_types"

DEFAULT_CACHE_DURATION = 3600
WARM_USER_AGENT = "FeedCache Cache Warmer"

_FALSY = ("", "0", "false", "no", "off")


def coerce_bool(value: Any) -> bool:
    """Interpret option/env values the way a settings form saves them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY
    return bool(value)


def split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid integer in {name}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid number in {name}, using {default}")
        return default


ENABLE_CACHING = coerce_bool(os.getenv("FEEDCACHE_ENABLE_CACHING", "1"))
CACHE_DURATION = _env_int("FEEDCACHE_CACHE_DURATION", DEFAULT_CACHE_DURATION)
SITE_URL = os.getenv("FEEDCACHE_SITE_URL", "http://localhost:8000")
CUSTOM_POST_TYPES = split_list(os.getenv("FEEDCACHE_CUSTOM_POST_TYPES", ""))
WARM_TIMEOUT = _env_float("FEEDCACHE_WARM_TIMEOUT", 10.0)


class CacheConfig:
    """
    Reads cache settings from the options table with environment defaults.

    Any read failure or invalid stored value falls back to the default, so
    a broken options table never disables the feed itself.

    Example:
        >>> config = CacheConfig(SessionLocal)
        >>> config.is_caching_enabled()
        True
        >>> config.get_cache_duration()
        3600
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        enable_caching: bool = ENABLE_CACHING,
        cache_duration: int = CACHE_DURATION,
        custom_post_types: Sequence[str] = tuple(CUSTOM_POST_TYPES),
    ):
        self._session_factory = session_factory
        self.enable_caching = enable_caching
        self.cache_duration = cache_duration if cache_duration > 0 else DEFAULT_CACHE_DURATION
        self.custom_post_types = list(custom_post_types)

    def _option(self, name: str, default: Any) -> Any:
        if self._session_factory is None:
            return default
        try:
            with self._session_factory() as db:
                return crud.get_option_value(db, name, default)
        except SQLAlchemyError as e:
            logger.warning(f"Could not read option '{name}', using default: {e}")
            return default

    def is_caching_enabled(self) -> bool:
        return coerce_bool(self._option(ENABLE_CACHING_OPTION, self.enable_caching))

    def get_cache_duration(self) -> int:
        """Cache duration in seconds; non-positive or garbage values fall back."""
        raw = self._option(CACHE_DURATION_OPTION, self.cache_duration)
        if isinstance(raw, bool):
            return self.cache_duration
        try:
            duration = int(raw)
        except (TypeError, ValueError):
            return self.cache_duration
        return duration if duration > 0 else self.cache_duration

    def get_custom_post_types(self) -> List[str]:
        raw = self._option(CUSTOM_POST_TYPES_OPTION, self.custom_post_types)
        if isinstance(raw, str):
            return split_list(raw)
        if not isinstance(raw, (list, tuple)):
            return list(self.custom_post_types)
        return [str(item).strip() for item in raw if str(item).strip()]
