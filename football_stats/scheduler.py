"""APScheduler jobs that sweep expired entries from both cache tiers."""

from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import setup_logger
from .method_cache import MethodCacheService
from .settings import METHOD_CACHE_SWEEP_MINUTES, TTL_CACHE_SWEEP_MINUTES
from .ttl_cache import CacheService

logger = setup_logger(__name__)

TTL_SWEEP_JOB_ID = "ttl_cache_sweep"
METHOD_SWEEP_JOB_ID = "method_cache_sweep"


def sweep_ttl_cache(cache: CacheService) -> dict:
    """Job function: drop expired in-memory entries and log stats around the sweep."""
    logger.info("Starting scheduled cache cleanup")
    logger.info("Cache stats before cleanup: %s", cache.stats().to_dict())
    removed = cache.clear_expired()
    logger.info("Cache stats after cleanup: %s", cache.stats().to_dict())
    return removed


def sweep_method_cache(method_cache: MethodCacheService) -> int:
    """Job function: bulk-delete expired durable rows."""
    return method_cache.cleanup_expired_entries()


def create_scheduler(cache: CacheService, method_cache: MethodCacheService) -> BackgroundScheduler:
    """Create and configure the scheduler. Call start() on the returned instance."""
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        sweep_ttl_cache,
        trigger=IntervalTrigger(minutes=TTL_CACHE_SWEEP_MINUTES),
        args=[cache],
        id=TTL_SWEEP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.add_job(
        sweep_method_cache,
        trigger=IntervalTrigger(minutes=METHOD_CACHE_SWEEP_MINUTES),
        args=[method_cache],
        id=METHOD_SWEEP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    return scheduler
