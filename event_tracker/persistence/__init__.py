"""Flat-file persistence for events and scan metadata."""

from .exceptions import (
    DuplicateEventError,
    PersistenceError,
    RecordNotFoundError,
    StoreCorruptedError,
)
from .repositories import (
    EventRepository,
    MetadataRepository,
    build_repositories,
    existing_keys,
)
from .storage import JSONFileStore, store_lock

__all__ = [
    "JSONFileStore",
    "EventRepository",
    "MetadataRepository",
    "build_repositories",
    "existing_keys",
    "store_lock",
    "PersistenceError",
    "StoreCorruptedError",
    "RecordNotFoundError",
    "DuplicateEventError",
]
