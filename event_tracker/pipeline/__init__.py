"""Scan pipeline: query fan-out, extraction, validation and merge."""

from .merge import MergeResult, merge_candidates
from .models import (
    ProgressLevel,
    ProgressMessage,
    ProgressSink,
    ScanResult,
    ScanStatus,
)
from .progress import ProgressReporter
from .runner import ScanPipeline, summarize

__all__ = [
    "ScanPipeline",
    "ScanResult",
    "ScanStatus",
    "ProgressLevel",
    "ProgressMessage",
    "ProgressSink",
    "ProgressReporter",
    "MergeResult",
    "merge_candidates",
    "summarize",
]
