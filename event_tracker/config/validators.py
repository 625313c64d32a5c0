"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    schedule = config_dict.get("schedule", {})
    if isinstance(schedule, dict) and schedule.get("enabled") is False:
        warning_messages.append(
            "Daily scan schedule is disabled; scans only run when triggered manually"
        )

    queries = config_dict.get("queries")
    if isinstance(queries, list):
        normalized = [q.strip().lower() for q in queries if isinstance(q, str)]
        if len(normalized) != len(set(normalized)):
            warning_messages.append("Duplicate search queries will be issued twice per scan")
        if len(normalized) > 10:
            warning_messages.append(
                f"{len(normalized)} search queries per scan may exhaust API rate limits"
            )

    region = config_dict.get("region", {})
    if isinstance(region, dict) and region.get("aliases") == []:
        warning_messages.append(
            "Region has no aliases; events listed under alternative spellings may be missed"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
