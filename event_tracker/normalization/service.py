"""Validation and coercion of extracted candidate records.

Candidates come straight from the language model and may be missing fields,
carry values outside the enumerations or not be objects at all. The
normalizer turns each one into an EventDraft or drops it; it never raises.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from event_tracker.domain.models import EventDraft
from event_tracker.logging import get_logger

logger = get_logger(__name__, component="normalization")


@dataclass
class NormalizationResult:
    """Drafts kept from one batch of candidates, in input order."""

    drafts: List[EventDraft] = field(default_factory=list)
    dropped: int = 0


class EventNormalizer:
    """
    Turns raw candidates into scan-sourced event drafts.

    Every kept draft is marked ``ai_found`` and stamped with the scan's
    reference date. A missing or empty venue becomes the region name.
    """

    def __init__(self, region_name: str, scan_date: str):
        """
        Args:
            region_name: Default venue
            scan_date: Reference date of the scan (YYYY-MM-DD), stored as scannedAt
        """
        self.region_name = region_name
        self.scan_date = scan_date

    def normalize(self, candidate: Any) -> Optional[EventDraft]:
        """
        Validate and coerce a single candidate.

        Returns:
            EventDraft, or None when the candidate is not an object or lacks
            a name or date
        """
        if not isinstance(candidate, Mapping):
            return None

        name = candidate.get("name")
        date = candidate.get("date")
        if not _is_present(name) or not _is_present(date):
            return None

        venue = candidate.get("venue")
        fields = {
            "name": name,
            "type": candidate.get("type"),
            "org": candidate.get("org"),
            "date": date,
            "endDate": candidate.get("endDate"),
            "venue": venue if _is_present(venue) else self.region_name,
            "mode": candidate.get("mode"),
            "reg": candidate.get("reg"),
            "url": candidate.get("url"),
            "tags": candidate.get("tags"),
            "desc": candidate.get("desc"),
            "aiFound": True,
            "scannedAt": self.scan_date,
        }

        try:
            return EventDraft.model_validate(fields)
        except ValidationError as e:
            # Only reachable for inputs the presence checks above let through
            logger.debug(
                "Candidate rejected by validation",
                extra={"event": "normalize.candidate.rejected", "error": str(e)},
            )
            return None

    def normalize_all(self, candidates: List[Any]) -> NormalizationResult:
        """Normalize a batch, keeping input order."""
        result = NormalizationResult()
        for candidate in candidates:
            draft = self.normalize(candidate)
            if draft is None:
                result.dropped += 1
            else:
                result.drafts.append(draft)

        if result.dropped:
            logger.info(
                f"Dropped {result.dropped} candidates without name or date",
                extra={"event": "normalize.dropped", "dropped": result.dropped},
            )
        return result


def _is_present(value: Any) -> bool:
    if value is None or isinstance(value, (bool, list, dict)):
        return False
    return bool(str(value).strip())
