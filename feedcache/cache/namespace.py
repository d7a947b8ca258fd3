"""
Fixed registry of well-known cache keys.

The stores behind the cache cannot always list their keys, so sweeping,
clearing and stats probe this enumerable set of base keys and variant
suffixes instead. Keys outside the registry are only reached on tiers that
support prefix enumeration.
"""
from dataclasses import dataclass
from typing import Iterator, List, Tuple

DEFAULT_BASE_KEYS = (
    "feed_cache",
    "performance_stats",
    "analytics_summary",
    "geographic_stats",
    "footer_cache",
)

# "" is the bare base key; the numeric suffixes are day windows
DEFAULT_VARIANT_SUFFIXES = ("", "_30", "_7", "_1", "_cache")


@dataclass(frozen=True)
class CacheKeyNamespace:
    base_keys: Tuple[str, ...] = DEFAULT_BASE_KEYS
    variant_suffixes: Tuple[str, ...] = DEFAULT_VARIANT_SUFFIXES

    def variants(self, base_key: str) -> List[str]:
        return [f"{base_key}{suffix}" for suffix in self.variant_suffixes]

    def keys(self) -> List[str]:
        """Every base key x variant combination, in order, without duplicates."""
        seen = {}
        for base_key in self.base_keys:
            for key in self.variants(base_key):
                seen.setdefault(key, None)
        return list(seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __contains__(self, key: str) -> bool:
        return key in self.keys()

    def __len__(self) -> int:
        return len(self.keys())


DEFAULT_NAMESPACE = CacheKeyNamespace()
