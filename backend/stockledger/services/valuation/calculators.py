# backend/stockledger/services/valuation/calculators.py
"""
Price-based valuation calculators.

Each calculator does one thing:
- holding_value: Value of one holding on a date
- GainLossCalculator: Close-to-close change between two dates
- MovingAverageCalculator: Trailing x-trading-day average close
- CrossoverCalculator: Dates whose close beats their moving average

Design Principles:
- Stateless (no instance state); the PriceProvider is passed in
- Exact dates only: nothing is snapped to a nearby trading day here
- Decimal for ALL financial calculations

Usage:
    calc = MovingAverageCalculator()
    calc.calculate("GOOG", date(2023, 1, 5), 20, prices)
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from stockledger.services.exceptions import (
    InvalidRangeError,
    OutOfRangeError,
    OutOfRangeForXError,
    PriceNotFoundError,
    ValidationError,
)
from stockledger.services.market_data.base import PriceProvider
from stockledger.utils.date_utils import format_iso_date

if TYPE_CHECKING:
    from stockledger.services.ledger.types import Holding

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def exact_close(ticker: str, on: date, prices: PriceProvider) -> Decimal:
    """
    Closing price on exactly `on`.

    Raises:
        PriceNotFoundError: `on` is outside the series or not a trading day
    """
    record = prices.get_record(ticker, on)
    if record is None:
        raise PriceNotFoundError(ticker, on)
    return record.close


def holding_value(holding: Holding, on: date, prices: PriceProvider) -> Decimal:
    """
    Value of a holding on `on`: shares x close.

    A holding added after `on` is worth 0 and no price is looked up.
    """
    if holding.date_added > on:
        return Decimal(0)
    return exact_close(holding.ticker, on, prices) * holding.shares


# =============================================================================
# GAIN / LOSS
# =============================================================================

class GainLossCalculator:
    """Price change of one share between two trading days."""

    def calculate(self, ticker: str, start: date, end: date, prices: PriceProvider) -> Decimal:
        """
        Return close(end) - close(start).

        Raises:
            InvalidRangeError: start > end
            PriceNotFoundError: No close on start or on end
        """
        if start > end:
            raise InvalidRangeError(start, end)
        return exact_close(ticker, end, prices) - exact_close(ticker, start, prices)


# =============================================================================
# MOVING AVERAGE
# =============================================================================

class MovingAverageCalculator:
    """
    Trailing moving average over `days` trading days ending on a date.

    The walk goes back one calendar day at a time and counts only days
    that have a record, so weekends and holidays are skipped.
    """

    def calculate(self, ticker: str, on: date, days: int, prices: PriceProvider) -> Decimal:
        """
        Average close of the `days` trading days ending on `on` (inclusive).

        Raises:
            ValidationError: days < 1
            PriceNotFoundError: `on` is not a trading day
            OutOfRangeError: History runs out before `days` closes were found
        """
        if days < 1:
            raise ValidationError(f"Moving average needs at least 1 day, got {days}", field="days")

        exact_close(ticker, on, prices)
        oldest, _ = prices.date_bounds(ticker)

        total = Decimal(0)
        collected = 0
        current = on
        while collected < days:
            if current < oldest:
                raise OutOfRangeError(ticker, current)
            record = prices.get_record(ticker, current)
            if record is not None:
                total += record.close
                collected += 1
            current -= ONE_DAY

        return total / days


# =============================================================================
# CROSSOVER
# =============================================================================

class CrossoverCalculator:
    """Finds the trading days whose close is above their x-day moving average."""

    def __init__(self, moving_average: MovingAverageCalculator | None = None) -> None:
        self._moving_average = moving_average or MovingAverageCalculator()

    def calculate(
            self,
            ticker: str,
            start: date,
            end: date,
            days: int,
            prices: PriceProvider,
    ) -> list[str]:
        """
        Return the crossover dates in [start, end] as ISO strings, oldest first.

        The up-front coverage check counts `days` calendar days back from
        start, while each moving average needs `days` trading days. A range
        that passes the check can still run out of history near start.

        Raises:
            InvalidRangeError: start > end
            OutOfRangeForXError: start - days precedes the series or end follows it
            OutOfRangeError: Fewer than `days` closes precede an early date in range
        """
        if start > end:
            raise InvalidRangeError(start, end)

        oldest, newest = prices.date_bounds(ticker)
        if start - timedelta(days=days) < oldest or end > newest:
            raise OutOfRangeForXError(ticker, start, end, days)

        crossovers = []
        current = start
        while current <= end:
            record = prices.get_record(ticker, current)
            if record is not None:
                average = self._moving_average.calculate(ticker, current, days, prices)
                if record.close > average:
                    crossovers.append(format_iso_date(current))
            current += ONE_DAY

        logger.debug(f"{len(crossovers)} crossovers for {ticker} ({days}-day) in {start}..{end}")
        return crossovers
