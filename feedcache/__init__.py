"""feedcache: TTL cache for rendered feed documents with tiered storage."""

__version__ = "1.0.0"
