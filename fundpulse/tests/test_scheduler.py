"""Tests for the background jobs."""

from unittest.mock import MagicMock

from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from fundpulse.cache import TTLCache
from fundpulse.config import Settings
from fundpulse.scheduler import build_scheduler, run_daily_sync


def make_services(**settings):
    services = MagicMock()
    services.settings = Settings(**settings)
    services.cache = TTLCache()
    return services


class TestRunDailySync:

    def test_categories_then_funds(self):
        services = make_services(sync_limit=25)
        run_daily_sync(services)

        calls = [c[0] for c in services.sync.method_calls]
        assert calls == ['sync_categories', 'sync_funds']
        services.sync.sync_funds.assert_called_once_with(25)

    def test_failure_is_logged_not_raised(self, caplog):
        services = make_services()
        services.sync.sync_categories.side_effect = RuntimeError("PulseDB down")

        run_daily_sync(services)

        services.sync.sync_funds.assert_not_called()
        assert "Scheduled daily sync failed: PulseDB down" in caplog.text


class TestBuildScheduler:

    def test_jobs_registered(self):
        scheduler = build_scheduler(make_services(sync_cron="30 15 * * *", cache_sweep_interval=60))

        jobs = {job.id: job for job in scheduler.get_jobs()}
        assert set(jobs) == {'daily_sync', 'cache_sweep'}
        assert isinstance(jobs['daily_sync'].trigger, CronTrigger)
        assert isinstance(jobs['cache_sweep'].trigger, IntervalTrigger)
        assert jobs['cache_sweep'].trigger.interval.total_seconds() == 60
        assert not scheduler.running
