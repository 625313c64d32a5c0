"""Language-model access: API client, prompts and reply parsing."""

from .client import AnthropicClient, build_client
from .exceptions import (
    ExtractionParseError,
    LLMError,
    LLMHTTPError,
    LLMResponseError,
    LLMTimeoutError,
)
from .parsing import parse_candidates, strip_code_fence
from .prompts import PromptRenderer, PromptRenderError

__all__ = [
    "AnthropicClient",
    "build_client",
    "PromptRenderer",
    "parse_candidates",
    "strip_code_fence",
    "LLMError",
    "LLMHTTPError",
    "LLMTimeoutError",
    "LLMResponseError",
    "ExtractionParseError",
    "PromptRenderError",
]
