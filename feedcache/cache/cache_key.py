"""Cache key generation logic."""
import hashlib


def hash_key(key: str) -> str:
    """
    Normalize a logical key of any length to a fixed 32-char digest.

    Example:
        >>> hash_key("feed_cache")
        "02d8b1ac8f53d9493820c466f74cb2a9"
    """
    return hashlib.md5(key.encode("utf-8")).hexdigest()


def generate_storage_key(prefix: str, key: str) -> str:
    """
    Build the key a storage tier stores an entry under.

    Args:
        prefix: Tier-specific prefix (e.g. "feedcache_cache_")
        key: Logical cache key supplied by the caller

    Returns:
        Prefixed digest of the logical key

    Example:
        >>> generate_storage_key("feedcache_", "feed_cache")
        "feedcache_02d8b1ac8f53d9493820c466f74cb2a9"
    """
    return f"{prefix}{hash_key(key)}"


def generate_post_cache_key(content_id) -> str:
    """
    Generate the cache key for a single content item.

    Example:
        >>> generate_post_cache_key(42)
        "post:42"
    """
    return f"post:{content_id}"
