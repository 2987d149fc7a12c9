# backend/stockledger/utils/context.py
"""
Request context for log correlation.

The correlation ID ties together every log line produced while serving one
API request (ledger mutation, price lookups, chart sampling). It is kept in a
ContextVar so it follows the request through threadpool handoffs.

Usage:
    from stockledger.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")      # middleware
    correlation_id = get_correlation_id()  # anywhere else
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Args:
        correlation_id: Unique identifier for this request
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)
