"""Self-expiring ephemeral storage tier."""
import copy
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from feedcache.cache.entry import CacheEntry
from .base import StorageTier


class EphemeralTier(StorageTier):
    """
    Expiring key-value store that hides its expiry metadata.

    Entries disappear on their own once their expiry passes, but ``read``
    only hands back the value (``created_at``/``expires_at`` are None), and
    keys cannot be listed. The sweeper therefore treats any entry it finds
    here as reclaimable.

    Thread-safe for single-key operations.

    Example:
        >>> tier = EphemeralTier()
        >>> tier.write("feedcache_abc", CacheEntry("feed", "<xml/>", 0, time.time() + 60))
        True
        >>> tier.read("feedcache_abc").value
        '<xml/>'
    """
    name = "ephemeral"
    tracks_expiry = False

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._store: Dict[str, Tuple[Any, Optional[float]]] = {}  # {key: (value, expires_at)}
        self._lock = threading.Lock()

    def read(self, storage_key: str) -> Optional[CacheEntry]:
        with self._lock:
            if storage_key not in self._store:
                return None

            value, expires_at = self._store[storage_key]
            if expires_at is not None and self._clock() >= expires_at:
                del self._store[storage_key]
                return None

            return CacheEntry(key=storage_key, value=copy.deepcopy(value))

    def write(self, storage_key: str, entry: CacheEntry) -> bool:
        value = copy.deepcopy(entry.value)
        with self._lock:
            self._store[storage_key] = (value, entry.expires_at)
        return True

    def remove(self, storage_key: str) -> bool:
        with self._lock:
            return self._store.pop(storage_key, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
