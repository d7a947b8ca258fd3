from sqlalchemy import Column, String, DateTime, PickleType, Boolean
from datetime import datetime
from feedcache.db.database import Base


class Option(Base):
    """Host-style key-value option row.

    Persistent cache entries live here as ``feedcache_cache_<md5>`` rows whose
    value is ``{"key", "value", "expiry", "created_at"}``; cache settings live
    here too under their own option names. Values are pickled, so any
    picklable Python value (bytes, tuples, datetimes, non-str dict keys)
    reads back exactly as written.
    """
    __tablename__ = "options"

    option_name = Column(String(191), primary_key=True)
    option_value = Column(PickleType, nullable=True)
    autoload = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
