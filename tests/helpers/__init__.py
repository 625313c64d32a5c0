"""Test helper utilities for event tracker tests."""

from .fake_client import FakeLLMClient, RecordingFactory
from .store import seed_events

__all__ = ["FakeLLMClient", "RecordingFactory", "seed_events"]
