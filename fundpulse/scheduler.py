"""
Background jobs.

Uses APScheduler to:
    1. Run the daily catalog sync (default 15:30 UTC, i.e. 21:00 IST)
    2. Sweep expired cache entries every minute
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


def run_daily_sync(services) -> None:
    """Categories first, then funds. Failures are logged, never raised."""
    logger.info("Starting scheduled daily sync")
    try:
        services.sync.sync_categories()
        services.sync.sync_funds(services.settings.sync_limit)
        logger.info("Scheduled daily sync completed")
    except Exception as e:
        logger.error(f"Scheduled daily sync failed: {e}")


def build_scheduler(services) -> BackgroundScheduler:
    settings = services.settings
    scheduler = BackgroundScheduler(timezone='UTC')

    scheduler.add_job(
        run_daily_sync,
        trigger=CronTrigger.from_crontab(settings.sync_cron, timezone='UTC'),
        args=[services],
        id='daily_sync',
        name='Daily PulseDB sync',
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_job(
        services.cache.sweep,
        trigger=IntervalTrigger(seconds=settings.cache_sweep_interval),
        id='cache_sweep',
        name='Cache sweep',
        replace_existing=True,
    )
    return scheduler


def start_scheduler(services) -> BackgroundScheduler:
    scheduler = build_scheduler(services)
    scheduler.start()
    logger.info(f"Daily sync job scheduled ({services.settings.sync_cron} UTC)")
    return scheduler
