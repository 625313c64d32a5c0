"""Scheduler service for the daily scan."""

from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from event_tracker.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "daily-scan"


class SchedulerService:
    """
    Wraps APScheduler to trigger the scan on a crontab schedule.

    Uses BackgroundScheduler so the job runs in a worker thread while the
    main thread serves HTTP and handles signals.
    """

    def __init__(
        self,
        scan_callable: Callable[[], object],
        cron: str = "30 2 * * *",
        timezone: str = "UTC",
    ):
        """
        Args:
            scan_callable: Function called on each trigger (e.g. pipeline.run_scan)
            cron: Five-field crontab expression
            timezone: Timezone the expression is evaluated in
        """
        self.scan_callable = scan_callable
        self.cron = cron
        self.timezone = timezone

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": 3600,
            },
            timezone=timezone,
        )

    def start(self) -> None:
        """Register the scan job and start the scheduler thread."""
        trigger = CronTrigger.from_crontab(self.cron, timezone=self.timezone)

        self.scheduler.add_job(
            func=self._run,
            trigger=trigger,
            id=JOB_ID,
            name="Daily event scan",
            replace_existing=True,
        )
        self.scheduler.start()

        next_run = self.get_next_run_time()
        logger.info(
            f"Scheduler started with cron '{self.cron}' ({self.timezone})",
            extra={
                "event": "scheduler.started",
                "cron": self.cron,
                "timezone": self.timezone,
                "next_run_time": next_run.isoformat() if next_run else None,
            },
        )

    def _run(self) -> None:
        logger.info("Daily scan triggered", extra={"event": "scheduler.triggered"})
        self.scan_callable()

    def shutdown(self, wait: bool = False) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: If True, wait for a running scan to complete before returning
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
