"""Data access layer (repositories) over the flat data files.

Repositories load the full collection, apply one change and write the full
collection back. Reads return domain models rather than raw dictionaries.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import ValidationError

from event_tracker.config.models import StorageConfig
from event_tracker.domain.models import Event, EventDraft, ScanMetadata, dedup_key
from event_tracker.logging import get_logger
from event_tracker.utils.timestamps import format_timestamp, utc_now

from .exceptions import DuplicateEventError, RecordNotFoundError, StoreCorruptedError
from .storage import JSONFileStore, store_lock

logger = get_logger(__name__, component="store")


class MetadataRepository:
    """Repository for the single scan metadata record."""

    def __init__(self, store: JSONFileStore):
        self.store = store

    def get(self) -> ScanMetadata:
        """
        Load scan metadata, returning a fresh record when none exists yet.

        Raises:
            StoreCorruptedError: If the metadata file holds an invalid record
        """
        data = self.store.read()
        if data is None:
            return ScanMetadata()
        try:
            return ScanMetadata.model_validate(data)
        except ValidationError as e:
            raise StoreCorruptedError(f"Invalid scan metadata in {self.store.path}: {e}") from e

    def save(self, metadata: ScanMetadata) -> None:
        self.store.write(metadata.to_record())

    def record_scan(self, added: int, highest_id: int) -> ScanMetadata:
        """Stamp a completed scan: last scan time, run count and added count."""
        with store_lock:
            metadata = self.get()
            metadata.last_scan = format_timestamp(utc_now())
            metadata.total_scans += 1
            metadata.last_added = added
            metadata.highest_id = max(metadata.highest_id, highest_id)
            self.save(metadata)

        logger.info(
            "Scan metadata updated",
            extra={
                "event": "store.meta.updated",
                "total_scans": metadata.total_scans,
                "last_added": added,
            },
        )
        return metadata

    def note_assigned_id(self, event_id: int) -> None:
        """Raise the id high-water mark to at least event_id."""
        with store_lock:
            metadata = self.get()
            if event_id > metadata.highest_id:
                metadata.highest_id = event_id
                self.save(metadata)


class EventRepository:
    """Repository for the event collection.

    Stored records are kept as written. Reads validate into ``Event`` models,
    while writes change only the record being added, updated or removed, so
    hand-edited fields and values outside the known choices survive.
    """

    def __init__(self, store: JSONFileStore, metadata: MetadataRepository):
        self.store = store
        self.metadata = metadata

    def read_records(self) -> List[Any]:
        """
        Load the raw stored records in order.

        Raises:
            StoreCorruptedError: If the file does not hold a JSON array
        """
        data = self.store.read()
        if not isinstance(data, list):
            raise StoreCorruptedError(f"{self.store.path} must contain a JSON array of events")
        return data

    def list_events(self) -> List[Event]:
        """Load every valid event in stored order; invalid records are skipped."""
        events = []
        for position, record in enumerate(self.read_records()):
            try:
                events.append(Event.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid event record at position {position}",
                    extra={
                        "event": "store.events.invalid_record",
                        "position": position,
                        "error_count": e.error_count(),
                    },
                )
        return events

    def get(self, event_id: int) -> Optional[Event]:
        for event in self.list_events():
            if event.id == event_id:
                return event
        return None

    def append(self, events: Iterable[Event]) -> None:
        """Add events after the stored records, leaving those untouched."""
        with store_lock:
            records = self.read_records()
            added = [event.to_record() for event in events]
            self._write(records + added)

    def next_id(self, records: Optional[List[Any]] = None) -> int:
        """Next unused id: one above both the current maximum and the high-water mark."""
        if records is None:
            records = self.read_records()
        current_max = max((record_id(record) or 0 for record in records), default=0)
        return max(current_max, self.metadata.get().highest_id) + 1

    def add(self, draft: EventDraft) -> Event:
        """
        Store a manually entered event.

        Raises:
            DuplicateEventError: If an event with the same name and date exists
        """
        with store_lock:
            records = self.read_records()
            _ensure_unique(records, draft.key)

            event = Event.from_draft(
                draft.model_copy(
                    update={"ai_found": False, "added_at": format_timestamp(utc_now())}
                ),
                self.next_id(records),
            )
            self._write(records + [event.to_record()])
            self.metadata.note_assigned_id(event.id)

        logger.info(
            f"Event {event.id} created",
            extra={"event": "api.event.created", "event_id": event.id},
        )
        return event

    def update(self, event_id: int, changes: Dict[str, Any]) -> Event:
        """
        Apply a partial update. The id cannot be changed.

        Raises:
            RecordNotFoundError: If no event has this id
            DuplicateEventError: If the update collides with another event
            pydantic.ValidationError: If the result is not a valid event
        """
        with store_lock:
            records = self.read_records()
            index = _index_of(records, event_id)

            updated = Event.model_validate({**records[index], **changes, "id": event_id})
            _ensure_unique(records[:index] + records[index + 1:], updated.key)

            records[index] = updated.to_record()
            self._write(records)

        logger.info(
            f"Event {event_id} updated",
            extra={"event": "api.event.updated", "event_id": event_id},
        )
        return updated

    def delete(self, event_id: int) -> None:
        """
        Remove an event.

        Raises:
            RecordNotFoundError: If no event has this id
        """
        with store_lock:
            records = self.read_records()
            records.pop(_index_of(records, event_id))
            # Keep the id reserved even when the newest event goes away
            self.metadata.note_assigned_id(event_id)
            self._write(records)

        logger.info(
            f"Event {event_id} deleted",
            extra={"event": "api.event.deleted", "event_id": event_id},
        )

    def _write(self, records: List[Any]) -> None:
        self.store.write(records)
        logger.debug(
            f"Stored {len(records)} events",
            extra={"event": "store.events.written", "count": len(records)},
        )


def record_id(record: Any) -> Optional[int]:
    """Integer id of a stored record, or None when it has none."""
    if not isinstance(record, dict):
        return None
    value = record.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def record_key(record: Any) -> Optional[str]:
    """Dedup key of a stored record as written, or None for non-objects."""
    if not isinstance(record, dict):
        return None
    return dedup_key(str(record.get("name") or ""), str(record.get("date") or ""))


def existing_keys(records: Iterable[Any]) -> Set[str]:
    """Dedup keys of the stored records."""
    keys = {record_key(record) for record in records}
    keys.discard(None)
    return keys


def _index_of(records: List[Any], event_id: int) -> int:
    for index, record in enumerate(records):
        if record_id(record) == event_id:
            return index
    raise RecordNotFoundError(event_id)


def _ensure_unique(records: List[Any], key: str) -> None:
    for record in records:
        if record_key(record) == key:
            raise DuplicateEventError(key, record_id(record))


def build_repositories(storage: StorageConfig) -> tuple[EventRepository, MetadataRepository]:
    """Create both repositories for the configured data directory."""
    data_dir = Path(storage.data_dir)
    metadata = MetadataRepository(JSONFileStore(data_dir / storage.meta_file, lambda: None))
    events = EventRepository(JSONFileStore(data_dir / storage.events_file, list), metadata)
    return events, metadata
