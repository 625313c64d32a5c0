"""Data models for scan execution and progress reporting."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional


class ProgressLevel(str, Enum):
    """Tag of a progress message. NOTE messages are sent untagged."""

    INFO = "info"
    OK = "ok"
    ERR = "err"
    NOTE = ""


@dataclass(frozen=True)
class ProgressMessage:
    """One progress update. ``str()`` gives the wire form ``"<tag>:<text>"``."""

    level: ProgressLevel
    text: str

    def __str__(self) -> str:
        return f"{self.level.value}:{self.text}"


ProgressSink = Callable[[ProgressMessage], None]


class ScanStatus(str, Enum):
    """Outcome of a run_scan call."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ScanResult:
    """
    Summary of one scan attempt.

    Attributes:
        status: COMPLETED when the merge stage ran, SKIPPED when another scan
            held the guard, FAILED otherwise
        scan_id: Identifier used in log records of this run
        reference_date: Calendar date the scan searched from (YYYY-MM-DD)
        started_at: UTC time the call began
        finished_at: UTC time the call returned
        queries_total: Search queries issued
        queries_failed: Search queries that produced no text
        extracted: Candidate records returned by extraction
        dropped: Candidates without a name or date
        duplicates: Candidates whose dedup key was already taken
        added: Events appended to the store
        error: Message of the failure that ended the run, if any
    """

    status: ScanStatus
    scan_id: str
    reference_date: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    queries_total: int = 0
    queries_failed: int = 0
    extracted: int = 0
    dropped: int = 0
    duplicates: int = 0
    added: int = 0
    error: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
