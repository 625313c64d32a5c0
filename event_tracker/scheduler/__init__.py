"""Scheduling of the daily scan."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
