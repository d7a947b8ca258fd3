"""
Dagster definitions for feedcache maintenance.

The hourly schedule is the production driver of the expiry sweep; the warm
job is launched on demand (e.g. after a deploy). Dagster keys schedules by
name, so loading these definitions never registers the cleanup twice.

Only the persistent tier is shared with the web processes; the ephemeral
and in-memory tiers seen here belong to the run's own process.
"""

from dagster import (
    Definitions,
    OpExecutionContext,
    ScheduleDefinition,
    job,
    op,
)

from feedcache.db.database import init_db
from feedcache.services.cache_service import build_cache_service
from feedcache.services.scheduler import CLEANUP_TASK_NAME


@op(description="Reclaims expired cache entries across all storage tiers")
def cleanup_expired_cache(context: OpExecutionContext) -> int:
    init_db()
    service = build_cache_service()
    report = service.sweep()

    context.log.info(f"Reclaimed {report.reclaimed} expired entries ({report.failed} failures)")
    if report.failed:
        context.log.warning(f"Per-tier reclaim counts: {report.per_tier}")
    return report.reclaimed


@op(description="Requests every known feed URL so they get rendered and cached")
def warm_feed_cache(context: OpExecutionContext) -> int:
    init_db()
    service = build_cache_service()
    warmed = service.warm_cache()
    context.log.info(f"Warmed {warmed} feeds")
    return warmed


@job(name="cache_cleanup_job")
def cache_cleanup_job():
    cleanup_expired_cache()


@job(name="cache_warm_job")
def cache_warm_job():
    warm_feed_cache()


cache_cleanup_schedule = ScheduleDefinition(
    name=CLEANUP_TASK_NAME,
    job=cache_cleanup_job,
    cron_schedule="0 * * * *",
)

defs = Definitions(
    jobs=[cache_cleanup_job, cache_warm_job],
    schedules=[cache_cleanup_schedule],
)
