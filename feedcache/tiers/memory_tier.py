"""Process-local in-memory object cache tier."""
import copy
import threading
from typing import Dict, Iterator, Optional

from feedcache.cache.entry import CacheEntry
from .base import StorageTier


class MemoryTier(StorageTier):
    """
    In-memory tier keeping full entries, listable by prefix and flushable.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the tier.
    """
    name = "memory"
    supports_scan = True
    supports_flush = True

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def read(self, storage_key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(storage_key)
            return copy.deepcopy(entry) if entry is not None else None

    def write(self, storage_key: str, entry: CacheEntry) -> bool:
        stored = copy.deepcopy(entry)
        with self._lock:
            self._entries[storage_key] = stored
        return True

    def remove(self, storage_key: str) -> bool:
        with self._lock:
            return self._entries.pop(storage_key, None) is not None

    def iter_keys(self, prefix: Optional[str] = None) -> Iterator[str]:
        prefix = prefix or self.key_prefix
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
        return iter(keys)

    def flush_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)
