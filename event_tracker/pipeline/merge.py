"""Append-only deduplicating merge of scan drafts into the event collection."""

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from event_tracker.domain.models import Event, EventDraft
from event_tracker.persistence.repositories import existing_keys


@dataclass
class MergeResult:
    """
    Attributes:
        added: Newly created events, in insertion order
        duplicates: Drafts skipped because their key was taken
        highest_id: Largest id handed out (next_id - 1 when nothing was added)
    """

    added: List[Event] = field(default_factory=list)
    duplicates: int = 0
    highest_id: int = 0


def merge_candidates(
    existing: Sequence[Any], drafts: Sequence[EventDraft], next_id: int
) -> MergeResult:
    """
    Pick the drafts to append to the stored records.

    Keys are taken by stored records and by drafts accepted earlier in the
    same call. Stored records are only read. Ids are assigned consecutively
    starting at next_id.
    """
    keys = existing_keys(existing)
    result = MergeResult()
    event_id = next_id

    for draft in drafts:
        if draft.key in keys:
            result.duplicates += 1
            continue

        event = Event.from_draft(draft, event_id)
        event_id += 1
        keys.add(draft.key)
        result.added.append(event)

    result.highest_id = event_id - 1
    return result
