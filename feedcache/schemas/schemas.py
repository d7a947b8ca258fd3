from pydantic import BaseModel
from typing import Optional, List, Dict
from feedcache.services.event_bus import ContentEvent


# =========================
# CACHE SCHEMAS
# =========================
class CacheStatsResponse(BaseModel):
    total_entries: int
    expired_entries: int
    active_entries: int
    cache_size_bytes: int
    cache_size_mb: float


class ClearCacheResponse(BaseModel):
    success: bool
    message: str
    cleared: int


class WarmCacheResponse(BaseModel):
    success: bool
    message: str
    warmed: int


class CleanupResponse(BaseModel):
    success: bool
    reclaimed: int
    failed: int
    per_tier: Dict[str, int] = {}


class CacheSettingsResponse(BaseModel):
    enabled: bool
    duration: int
    custom_post_types: List[str] = []


class CronResponse(BaseModel):
    ran: int


# =========================
# EVENT SCHEMAS
# =========================
class ContentEventRequest(BaseModel):
    event: ContentEvent
    content_id: Optional[int] = None


class ContentEventResponse(BaseModel):
    event: ContentEvent
    handlers: int
