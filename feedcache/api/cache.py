import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from feedcache.schemas.schemas import (
    CacheSettingsResponse,
    CacheStatsResponse,
    CleanupResponse,
    ClearCacheResponse,
    ContentEventRequest,
    ContentEventResponse,
    CronResponse,
    WarmCacheResponse,
)
from feedcache.services.cache_service import FeedCacheService

logger = logging.getLogger(__name__)

# Router
router = APIRouter(prefix="/api/cache", tags=["cache"])


def get_cache_service(request: Request) -> FeedCacheService:
    """The process-wide service built in the app lifespan."""
    return request.app.state.cache_service


# =========================
# STATS & SETTINGS
# =========================
@router.get("/stats", response_model=CacheStatsResponse)
def cache_stats(service: FeedCacheService = Depends(get_cache_service)):
    return service.get_cache_stats()


@router.get("/settings", response_model=CacheSettingsResponse)
def cache_settings(service: FeedCacheService = Depends(get_cache_service)):
    return CacheSettingsResponse(
        enabled=service.is_caching_enabled(),
        duration=service.get_cache_duration(),
        custom_post_types=service.config.get_custom_post_types(),
    )


# =========================
# MAINTENANCE
# =========================
@router.post("/clear", response_model=ClearCacheResponse)
def clear_cache(service: FeedCacheService = Depends(get_cache_service)):
    try:
        cleared = service.clear_all()
    except Exception as e:
        logger.error(f"Cache clear failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to clear cache: {e}")
    return ClearCacheResponse(success=True, message="Cache cleared successfully!", cleared=cleared)


@router.post("/warm", response_model=WarmCacheResponse)
def warm_cache(service: FeedCacheService = Depends(get_cache_service)):
    try:
        warmed = service.warm_cache()
    except Exception as e:
        logger.error(f"Cache warm failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to warm cache: {e}")
    return WarmCacheResponse(success=True, message="Cache warmed successfully!", warmed=warmed)


@router.post("/cleanup", response_model=CleanupResponse)
def cleanup_cache(service: FeedCacheService = Depends(get_cache_service)):
    report = service.sweep()
    return CleanupResponse(success=report.ok, **report.as_dict())


@router.post("/cron", response_model=CronResponse)
def run_cron(request: Request):
    """Tick the in-process scheduler, running the cleanup when it is due."""
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise HTTPException(status_code=404, detail="No in-process scheduler configured")
    return CronResponse(ran=scheduler.run_pending())


# =========================
# CONTENT EVENTS
# =========================
@router.post("/events", response_model=ContentEventResponse)
def publish_event(payload: ContentEventRequest, request: Request):
    """Webhook for the content system to report a mutation."""
    bus = request.app.state.event_bus
    handlers = bus.publish(payload.event, payload.content_id)
    return ContentEventResponse(event=payload.event, handlers=handlers)
