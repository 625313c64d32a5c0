"""Best-effort delivery of progress messages to an optional sink."""

import logging
from typing import Optional

from event_tracker.logging import get_logger

from .models import ProgressLevel, ProgressMessage, ProgressSink

logger = get_logger(__name__, component="pipeline")

_LOG_LEVELS = {
    ProgressLevel.INFO: logging.INFO,
    ProgressLevel.OK: logging.INFO,
    ProgressLevel.NOTE: logging.INFO,
    ProgressLevel.ERR: logging.WARNING,
}


class ProgressReporter:
    """Logs every progress message and forwards it to the sink, if any.

    A sink that raises is logged and otherwise ignored; it never interrupts
    the scan.
    """

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink

    def emit(self, level: ProgressLevel, text: str) -> None:
        message = ProgressMessage(level, text)
        logger.log(
            _LOG_LEVELS[level],
            f"[SCAN] {text}",
            extra={"event": "scan.progress", "progress_level": level.value or "none"},
        )

        if self.sink is None:
            return
        try:
            self.sink(message)
        except Exception as e:
            logger.warning(
                f"Progress sink failed: {e}",
                extra={"event": "scan.progress.sink_failed", "error_type": type(e).__name__},
            )

    def info(self, text: str) -> None:
        self.emit(ProgressLevel.INFO, text)

    def ok(self, text: str) -> None:
        self.emit(ProgressLevel.OK, text)

    def err(self, text: str) -> None:
        self.emit(ProgressLevel.ERR, text)

    def note(self, text: str) -> None:
        self.emit(ProgressLevel.NOTE, text)
