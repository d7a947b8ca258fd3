"""
feedcache FastAPI app
Cache admin routers plus utility endpoints (root, health)
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from feedcache import __version__
from feedcache.api import cache
from feedcache.db.database import check_connection, engine, init_db
from feedcache.services.cache_service import build_cache_service
from feedcache.services.event_bus import EventBus
from feedcache.services.scheduler import IntervalScheduler

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One service per process, owned by the app
    init_db()
    bus = EventBus()
    scheduler = IntervalScheduler()
    service = build_cache_service(bus=bus, scheduler=scheduler)
    service.start()

    app.state.event_bus = bus
    app.state.scheduler = scheduler
    app.state.cache_service = service
    try:
        yield
    finally:
        service.stop()


app = FastAPI(
    title="feedcache API",
    description="TTL cache for rendered feeds: stats, clearing, warming and sweeping",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(cache.router)


@app.get("/")
def root():
    """API info"""
    return {
        "message": "feedcache API is running",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "stats": "/api/cache/stats",
            "settings": "/api/cache/settings",
            "clear": "/api/cache/clear",
            "warm": "/api/cache/warm",
            "cleanup": "/api/cache/cleanup",
            "cron": "/api/cache/cron",
            "events": "/api/cache/events",
        },
    }


@app.get("/health")
def health_check():
    """Simple health endpoint"""
    connected = check_connection(engine)
    return {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "unreachable",
    }


# Run with:
#   uvicorn main:app --reload --port 8000
