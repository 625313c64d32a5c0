"""Tests for scoped logging context."""

import threading

import pytest

from event_tracker.logging.context import clear_log_context, get_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_context_manager_basic():
    """Test fields are active only inside the scope."""
    with log_context(scan_id="abc"):
        assert get_log_context() == {"scan_id": "abc"}

    assert get_log_context() == {}


def test_context_manager_nested():
    """Test inner scopes add to and override outer fields."""
    with log_context(scan_id="abc", reference_date="2025-04-20"):
        with log_context(query="AI meetup", scan_id="inner"):
            assert get_log_context() == {
                "scan_id": "inner",
                "reference_date": "2025-04-20",
                "query": "AI meetup",
            }

        assert get_log_context() == {"scan_id": "abc", "reference_date": "2025-04-20"}


def test_context_manager_exception():
    """Test the scope is unwound when an exception escapes."""
    with pytest.raises(RuntimeError):
        with log_context(scan_id="abc"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(scan_id="abc"):
        get_log_context()["scan_id"] = "changed"

        assert get_log_context() == {"scan_id": "abc"}


def test_clear_context():
    with log_context(scan_id="abc"):
        clear_log_context()
        assert get_log_context() == {}


def test_context_isolation():
    """Test a scope in one thread is not visible in another."""
    seen = {}
    entered = threading.Event()
    checked = threading.Event()

    def worker():
        with log_context(scan_id="worker"):
            entered.set()
            checked.wait(timeout=5)

    thread = threading.Thread(target=worker)
    thread.start()
    assert entered.wait(timeout=5)
    seen["main"] = get_log_context()
    checked.set()
    thread.join(timeout=5)

    assert seen["main"] == {}
