"""Unit tests for prompt rendering."""

import pytest

from event_tracker.config.models import RegionConfig
from event_tracker.llm import PromptRenderer, PromptRenderError


@pytest.fixture
def renderer():
    return PromptRenderer(RegionConfig())


class TestPromptRenderer:
    """Tests for the search and extraction prompts."""

    def test_search_system_mentions_date_and_region(self, renderer):
        prompt = renderer.search_system("2025-04-20")

        assert "Today is 2025-04-20" in prompt
        assert "AI/ML events in Bangalore" in prompt

    def test_search_user_contains_query(self, renderer):
        prompt = renderer.search_user("AI ML hackathon Bangalore 2025")

        assert "AI ML hackathon Bangalore 2025" in prompt

    def test_extract_system_lists_schema_and_region_names(self, renderer):
        prompt = renderer.extract_system("2025-04-20")

        assert "hackathon|meetup|workshop|conference" in prompt
        assert "In-Person|Online|Hybrid" in prompt
        assert "open|limited|closed|free" in prompt
        assert "Bangalore/Bengaluru AI/ML events" in prompt
        assert "Dates must be 2025-04-20 or later" in prompt

    def test_extract_user_embeds_text_verbatim(self, renderer):
        text = "\n\n=== query ===\n<b>AI Day</b> & more"

        prompt = renderer.extract_user(text)

        assert prompt.startswith("Extract events from:")
        assert "<b>AI Day</b> & more" in prompt

    def test_custom_region(self):
        renderer = PromptRenderer(RegionConfig(name="Pune", aliases=[], topic="Data"))

        prompt = renderer.extract_system("2025-04-20")

        assert "Only Pune Data events" in prompt

    def test_missing_template_raises(self, renderer):
        with pytest.raises(PromptRenderError):
            renderer._render("missing.j2")
