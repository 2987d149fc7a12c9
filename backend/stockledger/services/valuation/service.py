# backend/stockledger/services/valuation/service.py
"""
Stock Analysis Service - single-ticker market queries.

Entry point for the calculations that don't involve a ledger:
- gain_loss(): Close-to-close change between two dates
- moving_average(): Trailing x-day average close
- crossovers(): Dates whose close beats the x-day moving average

Design Principles:
- Dependency Injection: PriceProvider injected via constructor
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
- Composable: Uses one calculator per query

Usage:
    service = StockAnalysisService(prices)
    service.moving_average("GOOG", date(2023, 1, 5), 1)
"""

import logging
from datetime import date
from decimal import Decimal

from stockledger.services.constants import is_valid_ticker
from stockledger.services.exceptions import InvalidTickerError
from stockledger.services.market_data.base import PriceProvider
from stockledger.services.valuation.calculators import (
    CrossoverCalculator,
    GainLossCalculator,
    MovingAverageCalculator,
)

logger = logging.getLogger(__name__)


class StockAnalysisService:
    """
    Answers price questions about a single ticker.

    Attributes:
        _prices: Injected price provider
        _gain_loss_calc: Calculator for gain/loss
        _moving_average_calc: Calculator for moving averages
        _crossover_calc: Calculator for crossover dates
    """

    def __init__(self, prices: PriceProvider) -> None:
        self._prices = prices
        self._gain_loss_calc = GainLossCalculator()
        self._moving_average_calc = MovingAverageCalculator()
        self._crossover_calc = CrossoverCalculator(self._moving_average_calc)

    def gain_loss(self, ticker: str, start: date, end: date) -> Decimal:
        self._check_ticker(ticker)
        logger.info(f"Gain/loss for {ticker} from {start} to {end}")
        return self._gain_loss_calc.calculate(ticker, start, end, self._prices)

    def moving_average(self, ticker: str, on: date, days: int) -> Decimal:
        self._check_ticker(ticker)
        logger.info(f"{days}-day moving average for {ticker} on {on}")
        return self._moving_average_calc.calculate(ticker, on, days, self._prices)

    def crossovers(self, ticker: str, start: date, end: date, days: int) -> list[str]:
        self._check_ticker(ticker)
        logger.info(f"{days}-day crossovers for {ticker} from {start} to {end}")
        return self._crossover_calc.calculate(ticker, start, end, days, self._prices)

    @staticmethod
    def _check_ticker(ticker: str) -> None:
        if not is_valid_ticker(ticker):
            raise InvalidTickerError(ticker)
