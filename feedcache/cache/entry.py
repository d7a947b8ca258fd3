"""Cache entry record and the miss sentinel."""
import json
from dataclasses import dataclass
from typing import Any, Optional


class _Missing:
    """Marker for "no entry", distinct from any stored value including None."""

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


def estimate_size(value: Any) -> int:
    """
    Approximate byte size of a cached value.

    Uses the UTF-8 length of its JSON form; values JSON cannot express fall
    back to ``repr``. Grows with the payload, which is all stats need.
    """
    try:
        serialized = json.dumps(value, default=str)
    except (TypeError, ValueError):
        serialized = repr(value)
    return len(serialized.encode("utf-8"))


@dataclass
class CacheEntry:
    """
    One cached value with its timestamps (epoch seconds).

    Tiers that do not keep expiry metadata return entries whose
    ``created_at`` and ``expires_at`` are None.
    """

    key: str
    value: Any
    created_at: Optional[float] = None
    expires_at: Optional[float] = None

    @classmethod
    def create(cls, key: str, value: Any, ttl_seconds: float, now: float) -> "CacheEntry":
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        return cls(key=key, value=value, created_at=now, expires_at=now + ttl_seconds)

    @property
    def has_expiry(self) -> bool:
        return self.expires_at is not None

    def is_expired(self, now: float) -> bool:
        return self.has_expiry and now >= self.expires_at

    def size_bytes(self) -> int:
        return estimate_size(self.value)
