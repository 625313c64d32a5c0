"""Unit tests for the scheduler service.

Tests the SchedulerService including:
- Job registration with the configured crontab trigger
- Overlap prevention and coalescing defaults
- Start/shutdown lifecycle
"""

from datetime import datetime, timezone
from unittest.mock import Mock

from apscheduler.triggers.cron import CronTrigger

from event_tracker.scheduler import SchedulerService
from event_tracker.scheduler.service import JOB_ID


class TestSchedulerService:
    """Test suite for SchedulerService."""

    def test_scheduler_initialization(self):
        """Test that scheduler initializes with correct parameters."""
        mock_callable = Mock()
        scheduler = SchedulerService(
            scan_callable=mock_callable,
            cron="0 6 * * *",
            timezone="UTC",
        )

        assert scheduler.cron == "0 6 * * *"
        assert scheduler.scan_callable == mock_callable
        assert not scheduler.is_running()
        assert scheduler.get_next_run_time() is None

    def test_default_schedule_is_daily_0230_utc(self):
        scheduler = SchedulerService(scan_callable=Mock())

        assert scheduler.cron == "30 2 * * *"
        assert scheduler.timezone == "UTC"

    def test_scheduler_start_and_shutdown(self):
        """Test scheduler start and shutdown lifecycle."""
        scheduler = SchedulerService(scan_callable=Mock())

        scheduler.start()
        assert scheduler.is_running()

        scheduler.shutdown(wait=False)

        assert not scheduler.is_running()

    def test_job_registered_with_cron_trigger(self):
        """Test the job uses the crontab trigger and the overlap guards."""
        scheduler = SchedulerService(scan_callable=Mock(), cron="30 2 * * *")
        scheduler.start()

        try:
            job = scheduler.scheduler.get_job(JOB_ID)

            assert job is not None
            assert isinstance(job.trigger, CronTrigger)
            assert job.max_instances == 1
            assert job.coalesce is True
            assert job.misfire_grace_time == 3600
        finally:
            scheduler.shutdown(wait=False)

    def test_next_run_time_is_0230_utc(self):
        scheduler = SchedulerService(scan_callable=Mock(), cron="30 2 * * *")
        scheduler.start()

        try:
            next_run = scheduler.get_next_run_time()

            assert next_run is not None
            next_utc = next_run.astimezone(timezone.utc)
            assert (next_utc.hour, next_utc.minute) == (2, 30)
            assert next_utc > datetime.now(timezone.utc)
        finally:
            scheduler.shutdown(wait=False)

    def test_job_does_not_run_at_start(self):
        """Test starting the scheduler does not scan immediately."""
        mock_callable = Mock()
        scheduler = SchedulerService(scan_callable=mock_callable)
        scheduler.start()
        scheduler.shutdown(wait=True)

        mock_callable.assert_not_called()

    def test_scheduled_run_calls_scan(self):
        mock_callable = Mock()
        scheduler = SchedulerService(scan_callable=mock_callable)

        scheduler._run()

        mock_callable.assert_called_once_with()

    def test_shutdown_when_not_started(self):
        """Test shutdown without start is harmless."""
        scheduler = SchedulerService(scan_callable=Mock())

        scheduler.shutdown()

        assert not scheduler.is_running()
