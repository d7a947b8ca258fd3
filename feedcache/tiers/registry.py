"""Ordered registry of storage tiers."""
from typing import Dict, Iterable, Iterator, List, Optional
from .base import StorageTier


class TierRegistry:
    """
    Registry maintaining the fallback chain of storage tiers.

    Tiers are tried in registration order; the first one is the primary tier.
    """

    def __init__(self, tiers: Optional[Iterable[StorageTier]] = None):
        self._tiers: Dict[str, StorageTier] = {}
        for tier in tiers or ():
            self.register(tier)

    def register(self, tier: StorageTier) -> None:
        if not tier.name or tier.name == "unknown":
            raise ValueError(f"Tier {type(tier).__name__} must define a name")
        if tier.name in self._tiers:
            raise ValueError(f"Tier '{tier.name}' is already registered")
        self._tiers[tier.name] = tier

    def unregister(self, name: str) -> StorageTier:
        if name not in self._tiers:
            raise KeyError(f"No tier registered under name '{name}'")
        return self._tiers.pop(name)

    def get(self, name: str) -> StorageTier:
        if name not in self._tiers:
            raise KeyError(f"No tier registered under name '{name}'")
        return self._tiers[name]

    def chain(self) -> List[StorageTier]:
        return list(self._tiers.values())

    def names(self) -> List[str]:
        return list(self._tiers)

    @property
    def primary(self) -> StorageTier:
        if not self._tiers:
            raise LookupError("No storage tiers registered")
        return next(iter(self._tiers.values()))

    def __iter__(self) -> Iterator[StorageTier]:
        return iter(self.chain())

    def __len__(self) -> int:
        return len(self._tiers)

    def __contains__(self, name: str) -> bool:
        return name in self._tiers
