# backend/stockledger/services/constants.py
"""
Centralized constants for the Stock Ledger services.

Usage:
    from stockledger.services.constants import (
        TICKER_PATTERN,
        WEIGHT_TOTAL,
        DEFAULT_CHART_SYMBOLS,
    )
"""

import re


# =============================================================================
# TICKERS
# =============================================================================

# 1-4 uppercase ASCII letters, no normalization
TICKER_PATTERN = re.compile(r"^[A-Z]{1,4}$")


def is_valid_ticker(value: str | None) -> bool:
    return bool(value) and TICKER_PATTERN.fullmatch(value) is not None


# =============================================================================
# REBALANCING
# =============================================================================

# Rebalance weights are integer percentages that must add up to this
WEIGHT_TOTAL: int = 100


# =============================================================================
# CHARTING
# =============================================================================

# Symbols drawn for the largest value in a chart
DEFAULT_CHART_SYMBOLS: int = 40

# The symbol used for chart bars
CHART_SYMBOL: str = "*"

# Span thresholds (in calendar days) used to pick a chart granularity
DAILY_SPAN_LIMIT: int = 5
STEPPED_DAILY_SPAN_LIMIT: int = 150
MONTHLY_SPAN_LIMIT: int = 365 // 12 * 30
STEPPED_MONTHLY_SPAN_LIMIT: int = 1825
YEARLY_SPAN_LIMIT: int = 10950

# Roughly how many rows a chart aims for when the step is > 1
TARGET_CHART_ROWS: int = 20
