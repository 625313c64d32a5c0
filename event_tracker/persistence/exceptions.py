"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch every storage problem with a single except clause.
"""

from typing import Optional


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class StoreCorruptedError(PersistenceError):
    """Raised when a data file exists but cannot be parsed or validated.

    The file is left untouched; it is never replaced by an empty collection.
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation targets an event id that does not exist."""

    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class DuplicateEventError(PersistenceError):
    """Raised when a write would store two events with the same name and date."""

    def __init__(self, key: str, existing_id: Optional[int]) -> None:
        super().__init__(f"An event with the same name and date already exists (id {existing_id})")
        self.key = key
        self.existing_id = existing_id
