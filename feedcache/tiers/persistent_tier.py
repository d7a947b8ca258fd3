"""Options-table storage tier (SQLAlchemy)."""
import pickle
from typing import Callable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from feedcache.cache.entry import CacheEntry
from feedcache.cache.exceptions import StorageUnavailable
from feedcache.db import crud
from .base import StorageTier


class PersistentTier(StorageTier):
    """
    Stores entries as rows of the options table.

    Each row value is ``{"key", "value", "expiry", "created_at"}``, pickled by
    the column type, so values read back exactly and expiry metadata survives
    restarts for the sweeper to tell stale rows apart.
    Rows are listed with a ``LIKE 'prefix%'`` query, which gives this tier a
    real prefix scan.
    """
    name = "persistent"
    key_prefix = "feedcache_cache_"
    supports_scan = True

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from feedcache.db.database import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    def read(self, storage_key: str) -> Optional[CacheEntry]:
        try:
            with self._session_factory() as db:
                payload = crud.get_option_value(db, storage_key)
        except SQLAlchemyError as e:
            raise StorageUnavailable(self.name, str(e)) from e

        if payload is None:
            return None
        if not isinstance(payload, dict) or "value" not in payload:
            # Written by something else; no metadata to expire it by
            return CacheEntry(key=storage_key, value=payload)
        return CacheEntry(
            key=payload.get("key") or storage_key,
            value=payload["value"],
            created_at=payload.get("created_at"),
            expires_at=payload.get("expiry"),
        )

    def write(self, storage_key: str, entry: CacheEntry) -> bool:
        payload = {
            "key": entry.key,
            "value": entry.value,
            "expiry": entry.expires_at,
            "created_at": entry.created_at,
        }
        try:
            pickle.dumps(payload)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise TypeError(f"Cache value for '{entry.key}' cannot be serialized: {e}") from e

        try:
            with self._session_factory() as db:
                crud.update_option(db, storage_key, payload, autoload=False)
        except SQLAlchemyError as e:
            raise StorageUnavailable(self.name, str(e)) from e
        return True

    def remove(self, storage_key: str) -> bool:
        try:
            with self._session_factory() as db:
                return crud.delete_option(db, storage_key)
        except SQLAlchemyError as e:
            raise StorageUnavailable(self.name, str(e)) from e

    def iter_keys(self, prefix: Optional[str] = None) -> Iterator[str]:
        try:
            with self._session_factory() as db:
                names = crud.list_option_names(db, prefix or self.key_prefix)
        except SQLAlchemyError as e:
            raise StorageUnavailable(self.name, str(e)) from e
        return iter(names)
