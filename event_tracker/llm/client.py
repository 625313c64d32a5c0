"""Client for the Anthropic Messages API.

Two capabilities are exposed to the scan pipeline:
- search(): a web-search-enabled call that returns free text
- extract(): a plain call that turns free text into raw structured text

Authentication and transport details stay inside this module.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from event_tracker.config.models import LLMConfig
from event_tracker.logging import get_logger

from .exceptions import LLMError, LLMHTTPError, LLMResponseError, LLMTimeoutError

logger = get_logger(__name__, component="llm")

WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search"}


class AnthropicClient:
    """Thin wrapper over the Messages endpoint using a requests session.

    Attributes:
        config: Model, endpoint and timeout settings
    """

    def __init__(self, api_key: str, config: LLMConfig) -> None:
        """
        Args:
            api_key: Anthropic API key
            config: LLM configuration

        Raises:
            LLMError: If api_key is empty
        """
        if not api_key or not api_key.strip():
            raise LLMError("An API key is required")

        self.config = config
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "User-Agent": config.user_agent,
                "x-api-key": api_key.strip(),
                "anthropic-version": config.api_version,
            }
        )

    def close(self) -> None:
        self._session.close()

    def search(self, query: str, system_prompt: str, user_prompt: str) -> str:
        """
        Run one web-search call.

        Args:
            query: The raw query, used for logging only
            system_prompt: System instruction
            user_prompt: User message containing the query

        Returns:
            Text blocks of the reply joined by newlines ("" if there are none)

        Raises:
            LLMError: On HTTP, timeout or response errors
        """
        data = self._post(
            {
                "model": self.config.model,
                "max_tokens": self.config.search_max_tokens,
                "system": system_prompt,
                "tools": [WEB_SEARCH_TOOL],
                "messages": [{"role": "user", "content": user_prompt}],
            },
            purpose="search",
        )
        text = "\n".join(_text_blocks(data))
        logger.debug(
            "Search reply received",
            extra={"event": "llm.search.succeeded", "query": query, "chars": len(text)},
        )
        return text

    def extract(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run the structuring call.

        Returns:
            Text blocks of the reply concatenated without separator

        Raises:
            LLMError: On HTTP, timeout or response errors
        """
        data = self._post(
            {
                "model": self.config.model,
                "max_tokens": self.config.extract_max_tokens,
                "system": system_prompt,
                "messages": [{"role": "user", "content": user_prompt}],
            },
            purpose="extract",
        )
        return "".join(_text_blocks(data))

    def _post(self, payload: Dict[str, Any], purpose: str) -> Any:
        url = self.config.api_url
        try:
            logger.debug(
                f"POST {url}",
                extra={
                    "event": "llm.request",
                    "purpose": purpose,
                    "model": self.config.model,
                    "timeout": self.config.request_timeout,
                },
            )
            response = self._session.post(url, json=payload, timeout=self.config.request_timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"{purpose} request timed out after {self.config.request_timeout} seconds",
                extra={"event": "llm.request.timeout", "purpose": purpose},
            )
            raise LLMTimeoutError(
                f"Request timed out after {self.config.request_timeout} seconds"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.warning(
                f"{purpose} request failed: {e}",
                extra={"event": "llm.request.error", "purpose": purpose, "error_type": type(e).__name__},
            )
            raise LLMHTTPError(f"Request failed: {e}", status_code=0) from e

        if response.status_code >= 400:
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} from language-model API",
                extra={
                    "event": "llm.request.http_error",
                    "purpose": purpose,
                    "status_code": response.status_code,
                },
            )
            raise LLMHTTPError(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise LLMResponseError(f"Response from {url} is not JSON: {e}") from e


def _text_blocks(data: Any) -> List[str]:
    """Text of every ``{"type": "text"}`` block; malformed bodies give no blocks."""
    if not isinstance(data, dict):
        return []
    content = data.get("content")
    if not isinstance(content, list):
        return []
    return [
        block["text"]
        for block in content
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]


def build_client(api_key: Optional[str], config: LLMConfig) -> AnthropicClient:
    """Factory used by the pipeline; kept separate so tests can substitute it."""
    return AnthropicClient(api_key or "", config)
