"""Storage tiers package: StorageTier interface, backends and the tier chain."""
from .base import StorageTier
from .registry import TierRegistry
from .persistent_tier import PersistentTier
from .ephemeral_tier import EphemeralTier
from .memory_tier import MemoryTier

__all__ = [
    "StorageTier",
    "TierRegistry",
    "PersistentTier",
    "EphemeralTier",
    "MemoryTier",
]
