"""Core domain models for events and scan metadata.

This module defines the data structures used throughout the application:
- EventDraft: an event that has not been given an id yet (manual input or
  a validated scan candidate)
- Event: a stored event with its integer id
- ScanMetadata: history of the scan pipeline

On disk and over HTTP the models use camelCase keys (``endDate``,
``aiFound``, ``addedAt``, ``scannedAt``, ``lastScan``, ...). Python code
uses the snake_case attribute names.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_TAGS = 6

E = TypeVar("E", bound=Enum)


class EventType(str, Enum):
    """Kind of event."""

    HACKATHON = "hackathon"
    MEETUP = "meetup"
    WORKSHOP = "workshop"
    CONFERENCE = "conference"


class EventMode(str, Enum):
    """How attendees take part."""

    IN_PERSON = "In-Person"
    ONLINE = "Online"
    HYBRID = "Hybrid"


class Registration(str, Enum):
    """Registration status."""

    OPEN = "open"
    LIMITED = "limited"
    CLOSED = "closed"
    FREE = "free"


def coerce_choice(value: Any, enum_cls: Type[E], default: E) -> E:
    """Map a raw value onto an enum member, falling back to default.

    Matching ignores case and surrounding whitespace, so ``"Hackathon "``
    becomes ``EventType.HACKATHON`` and ``"in-person"`` becomes
    ``EventMode.IN_PERSON``. Anything else, including None and non-strings,
    yields the default.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default

    wanted = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return default


def dedup_key(name: str, date: str) -> str:
    """Uniqueness key of an event: lower-cased trimmed name plus date."""
    return f"{(name or '').strip().lower()}|{date}"


class EventDraft(BaseModel):
    """Event fields without an id.

    Enumerated fields never fail validation: unknown values degrade to
    ``meetup`` / ``In-Person`` / ``open``. Free-text fields accept None as an
    empty string. Unknown keys are preserved so manually entered records may
    carry extra attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    type: EventType = EventType.MEETUP
    org: str = ""
    date: str
    end_date: str = Field("", alias="endDate")
    venue: str = ""
    mode: EventMode = EventMode.IN_PERSON
    reg: Registration = Registration.OPEN
    url: str = ""
    tags: List[str] = Field(default_factory=list)
    desc: str = ""
    ai_found: bool = Field(False, alias="aiFound")
    added_at: Optional[str] = Field(None, alias="addedAt")
    scanned_at: Optional[str] = Field(None, alias="scannedAt")

    @field_validator("name", "date", mode="before")
    @classmethod
    def require_text(cls, v: Any) -> str:
        if v is None or isinstance(v, (dict, list, bool)):
            raise ValueError("Field is required")
        stripped = str(v).strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("org", "end_date", "venue", "url", "desc", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> str:
        if v is None or isinstance(v, (dict, list)):
            return ""
        return str(v).strip()

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> EventType:
        return coerce_choice(v, EventType, EventType.MEETUP)

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> EventMode:
        return coerce_choice(v, EventMode, EventMode.IN_PERSON)

    @field_validator("reg", mode="before")
    @classmethod
    def coerce_reg(cls, v: Any) -> Registration:
        return coerce_choice(v, Registration, Registration.OPEN)

    @field_validator("tags", mode="before")
    @classmethod
    def limit_tags(cls, v: Any) -> List[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [str(tag) for tag in v[:MAX_TAGS] if tag is not None]

    @property
    def key(self) -> str:
        return dedup_key(self.name, self.date)

    def to_record(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting unset timestamps."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Event(EventDraft):
    """A stored event."""

    id: int = Field(..., ge=1)

    @classmethod
    def from_draft(cls, draft: EventDraft, event_id: int) -> "Event":
        return cls.model_validate({**draft.model_dump(), "id": event_id})

    def to_record(self) -> Dict[str, Any]:
        data = super().to_record()
        return {"id": data.pop("id"), **data}


class ScanMetadata(BaseModel):
    """Process-wide scan history, persisted as a single record.

    ``highest_id`` is the largest event id ever handed out. Ids are assigned
    above it so an id is never reused, even after the newest event is deleted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    last_scan: Optional[str] = Field(None, alias="lastScan")
    total_scans: int = Field(0, ge=0, alias="totalScans")
    last_added: int = Field(0, ge=0, alias="lastAdded")
    highest_id: int = Field(0, ge=0, alias="highestId")

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
