"""Scoped logging context.

Fields pushed with :class:`log_context` are attached to every log record
emitted inside the scope, which is how all records of one scan carry the
same ``scan_id``. Backed by ``contextvars`` so scopes in different threads
never leak into each other.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return _LOG_CONTEXT.get().copy()


def clear_log_context() -> None:
    """Drop every active field. Used by tests."""
    _LOG_CONTEXT.set({})


class log_context:
    """Context manager adding fields to all log records within its scope.

    Example:
        >>> with log_context(scan_id="3f2a", reference_date="2025-05-01"):
        ...     logger.info("Searching")  # record carries scan_id and reference_date
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self._token = _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._token is not None:
            _LOG_CONTEXT.reset(self._token)
            self._token = None
        return False
