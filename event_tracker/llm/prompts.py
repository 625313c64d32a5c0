"""Prompt rendering using Jinja2.

Prompt texts live as templates in the ``event_tracker.llm.prompts`` package
directory. Missing template variables raise instead of rendering blanks.
"""

from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from event_tracker.config.models import RegionConfig
from event_tracker.logging import get_logger

from .exceptions import LLMError

logger = get_logger(__name__, component="llm")


class PromptRenderError(LLMError):
    """A prompt template could not be rendered."""

    pass


class PromptRenderer:
    """Renders the search and extraction prompts for one region."""

    SEARCH_SYSTEM = "search_system.j2"
    SEARCH_USER = "search_user.j2"
    EXTRACT_SYSTEM = "extract_system.j2"
    EXTRACT_USER = "extract_user.j2"

    def __init__(self, region: RegionConfig):
        self.region = region
        self.env = Environment(
            loader=PackageLoader("event_tracker.llm", "prompts"),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def _render(self, template_name: str, **context: Any) -> str:
        base: Dict[str, Any] = {
            "region": self.region.name,
            "region_names": self.region.all_names,
            "topic": self.region.topic,
        }
        try:
            return self.env.get_template(template_name).render({**base, **context}).strip()
        except TemplateError as e:
            logger.error(
                f"Prompt rendering failed for {template_name}: {e}",
                extra={"event": "llm.prompt.failed", "template": template_name},
            )
            raise PromptRenderError(f"Prompt rendering failed for {template_name}: {e}") from e

    def search_system(self, today: str) -> str:
        return self._render(self.SEARCH_SYSTEM, today=today)

    def search_user(self, query: str) -> str:
        return self._render(self.SEARCH_USER, query=query)

    def extract_system(self, today: str) -> str:
        return self._render(self.EXTRACT_SYSTEM, today=today)

    def extract_user(self, aggregated_text: str) -> str:
        return self._render(self.EXTRACT_USER, text=aggregated_text)
