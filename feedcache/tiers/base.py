"""Base storage tier interface."""
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from feedcache.cache.cache_key import generate_storage_key
from feedcache.cache.entry import CacheEntry


class StorageTier(ABC):
    """
    Base class every storage backend the cache writes to must inherit.

    Each tier defines a unique ``name`` and a ``key_prefix`` used to map
    logical keys to storage keys, and implements ``read``/``write``/``remove``
    on storage keys. Backend failures must surface as
    :class:`~feedcache.cache.exceptions.StorageUnavailable`; an absent key is
    not an error (``read`` returns None, ``remove`` returns False). A value
    the tier cannot serialize or copy raises TypeError.

    Optional capabilities are advertised by class flags:

    - ``tracks_expiry``: ``read`` returns entries with timestamps. Tiers that
      expire entries on their own and hide the metadata set this False.
    - ``supports_scan``: ``iter_keys`` can list stored keys by prefix.
    - ``supports_flush``: ``flush_all`` empties the whole tier.
    """
    name: str = "unknown"
    key_prefix: str = "feedcache_"
    tracks_expiry: bool = True
    supports_scan: bool = False
    supports_flush: bool = False

    def storage_key(self, key: str) -> str:
        return generate_storage_key(self.key_prefix, key)

    @abstractmethod
    def read(self, storage_key: str) -> Optional[CacheEntry]:
        """Return the stored entry or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def write(self, storage_key: str, entry: CacheEntry) -> bool:
        """Store ``entry``, replacing any previous value. Returns success."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, storage_key: str) -> bool:
        """Delete the key. Returns whether something was removed."""
        raise NotImplementedError

    def iter_keys(self, prefix: Optional[str] = None) -> Iterator[str]:
        raise NotImplementedError(f"Tier '{self.name}' cannot enumerate keys")

    def flush_all(self) -> None:
        raise NotImplementedError(f"Tier '{self.name}' cannot be flushed")

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name!r}>"
