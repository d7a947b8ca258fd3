"""Cache error types."""


class CacheError(Exception):
    """Base class for cache errors."""
    pass


class StorageUnavailable(CacheError):
    """Raised by a storage tier that cannot be reached, read or written."""

    def __init__(self, tier_name: str, reason: str = ""):
        self.tier_name = tier_name
        self.reason = reason
        message = f"Storage tier '{tier_name}' unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
