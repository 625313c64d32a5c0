"""Sanitising and parsing of the extraction reply.

The model is asked for a bare JSON array but often wraps it in a markdown
code fence. The fence is removed before parsing; nothing else is repaired.
"""

import json
import re
from typing import Any, List

from .exceptions import ExtractionParseError

_LEADING_FENCE = re.compile(r"^\s*```[a-z0-9_-]*[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```\s*$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```` ```lang ```` line and a trailing ```` ``` ````, then trim.

    Example:
        >>> strip_code_fence('```json\\n[{"name": "AI Day"}]\\n```')
        '[{"name": "AI Day"}]'
    """
    if not text:
        return ""
    cleaned = _LEADING_FENCE.sub("", text, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_candidates(text: str) -> List[Any]:
    """
    Parse the extraction reply into a list of candidate records.

    Returns:
        The parsed list. A well-formed JSON value that is not an array
        yields an empty list.

    Raises:
        ExtractionParseError: If the (unfenced) text is not valid JSON
    """
    cleaned = strip_code_fence(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionParseError(f"Extraction reply is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(parsed, list):
        return []
    return parsed
