"""Validation and coercion of scan candidates into event drafts."""

from .service import EventNormalizer, NormalizationResult

__all__ = [
    "EventNormalizer",
    "NormalizationResult",
]
