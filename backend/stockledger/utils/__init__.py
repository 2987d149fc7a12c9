# backend/stockledger/utils/__init__.py
"""
Cross-cutting utilities for Stock Ledger.

- logging: Logging configuration with correlation ID support
- context: Request context (correlation IDs)
- date_utils: ISO parsing and calendar arithmetic

Usage:
    from stockledger.utils import setup_logging, get_logger
    from stockledger.utils.date_utils import parse_iso_date
"""

from stockledger.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from stockledger.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
