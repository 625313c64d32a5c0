"""Domain models for events and scan metadata."""

from .models import (
    MAX_TAGS,
    Event,
    EventDraft,
    EventMode,
    EventType,
    Registration,
    ScanMetadata,
    dedup_key,
)

__all__ = [
    "Event",
    "EventDraft",
    "EventMode",
    "EventType",
    "Registration",
    "ScanMetadata",
    "MAX_TAGS",
    "dedup_key",
]
