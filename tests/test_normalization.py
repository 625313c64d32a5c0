"""Unit tests for normalization layer.

Tests the EventNormalizer service for:
- Dropping candidates that are not objects or lack a name or date
- Enumeration defaults for unknown values
- Venue fallback to the region name
- Scan markers (aiFound, scannedAt)
- Batch processing order and drop counting
"""

import pytest

from event_tracker.domain.models import EventMode, EventType, Registration
from event_tracker.normalization import EventNormalizer, NormalizationResult


@pytest.fixture
def normalizer():
    """Normalizer for the default region and a fixed scan date."""
    return EventNormalizer(region_name="Bangalore", scan_date="2025-04-20")


class TestNormalize:
    """Tests for single-candidate normalization."""

    def test_full_candidate(self, normalizer):
        candidate = {
            "name": "Bengaluru GenAI Hackathon",
            "type": "hackathon",
            "org": "GDG Bangalore",
            "date": "2025-05-10",
            "endDate": "2025-05-11",
            "venue": "Koramangala",
            "mode": "Hybrid",
            "reg": "limited",
            "url": "https://example.org/hack",
            "tags": ["genai", "llm"],
            "desc": "48h build sprint",
        }

        draft = normalizer.normalize(candidate)

        assert draft.name == "Bengaluru GenAI Hackathon"
        assert draft.type == EventType.HACKATHON
        assert draft.end_date == "2025-05-11"
        assert draft.venue == "Koramangala"
        assert draft.mode == EventMode.HYBRID
        assert draft.reg == Registration.LIMITED
        assert draft.tags == ["genai", "llm"]
        assert draft.ai_found is True
        assert draft.scanned_at == "2025-04-20"

    def test_minimal_candidate_gets_defaults(self, normalizer):
        """Test only name and date are needed."""
        draft = normalizer.normalize({"name": "AI Day", "date": "2025-05-01"})

        assert draft.type == EventType.MEETUP
        assert draft.mode == EventMode.IN_PERSON
        assert draft.reg == Registration.OPEN
        assert draft.venue == "Bangalore"
        assert draft.org == ""
        assert draft.tags == []

    @pytest.mark.parametrize("venue", [None, "", "   "])
    def test_blank_venue_falls_back_to_region(self, normalizer, venue):
        draft = normalizer.normalize({"name": "AI Day", "date": "2025-05-01", "venue": venue})

        assert draft.venue == "Bangalore"

    @pytest.mark.parametrize(
        "candidate",
        [
            {"date": "2025-05-01"},
            {"name": "AI Day"},
            {"name": "", "date": "2025-05-01"},
            {"name": "AI Day", "date": "  "},
            {"name": None, "date": "2025-05-01"},
            {"name": ["AI Day"], "date": "2025-05-01"},
        ],
    )
    def test_missing_name_or_date_dropped(self, normalizer, candidate):
        assert normalizer.normalize(candidate) is None

    @pytest.mark.parametrize("candidate", ["AI Day", 42, None, ["AI Day", "2025-05-01"]])
    def test_non_object_dropped(self, normalizer, candidate):
        assert normalizer.normalize(candidate) is None

    def test_model_cannot_mark_event_manual(self, normalizer):
        """Test scan markers override values supplied by the model."""
        draft = normalizer.normalize(
            {"name": "AI Day", "date": "2025-05-01", "aiFound": False, "scannedAt": "1999-01-01"}
        )

        assert draft.ai_found is True
        assert draft.scanned_at == "2025-04-20"

    def test_unknown_keys_ignored(self, normalizer):
        draft = normalizer.normalize({"name": "AI Day", "date": "2025-05-01", "id": 99})

        assert "id" not in draft.to_record()


class TestNormalizeAll:
    """Tests for batch normalization."""

    def test_keeps_order_and_counts_drops(self, normalizer):
        candidates = [
            {"name": "First", "date": "2025-05-01"},
            {"name": "No date"},
            "garbage",
            {"name": "Second", "date": "2025-05-02"},
        ]

        result = normalizer.normalize_all(candidates)

        assert isinstance(result, NormalizationResult)
        assert [draft.name for draft in result.drafts] == ["First", "Second"]
        assert result.dropped == 2

    def test_empty_batch(self, normalizer):
        result = normalizer.normalize_all([])

        assert result.drafts == []
        assert result.dropped == 0
