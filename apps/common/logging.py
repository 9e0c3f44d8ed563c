"""
Logging helpers for ResellerHub.

RequestIDFilter injects the current request id (set by RequestIDMiddleware)
into every log record so webhook processing can be traced end to end,
including across renewal worker threads.
"""

from __future__ import annotations

import logging
import threading

# Thread-local storage for request context
_request_context = threading.local()


# =============================================================================
# REQUEST CONTEXT FUNCTIONS
# =============================================================================


def set_request_id(request_id: str | None) -> None:
    """Set the current request ID in thread-local storage."""
    _request_context.request_id = request_id


def get_request_id() -> str | None:
    """Get the current request ID from thread-local storage."""
    return getattr(_request_context, "request_id", None)


def clear_request_id() -> None:
    """Clear the request ID from thread-local storage."""
    _request_context.request_id = None


# =============================================================================
# LOG FILTERS
# =============================================================================


class RequestIDFilter(logging.Filter):
    """
    Add request ID to log records.

    Records emitted outside a request get "-" so format strings never fail.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id() or "-"
        return True
