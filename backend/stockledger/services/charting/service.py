# backend/stockledger/services/charting/service.py
"""
Performance Chart Service - builds stock and portfolio charts.

Composes the three charting pieces:
    choose_granularity -> sample_dates -> default_scale / render_chart

Usage:
    service = PerformanceChartService(prices)
    chart = service.stock_chart("AAPL", date(2024, 1, 1), date(2024, 6, 30))
    print(chart.render())
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from stockledger.services.charting.date_scale import (
    Granularity,
    choose_granularity,
    format_label,
)
from stockledger.services.charting.renderer import (
    Scale,
    default_scale,
    render_chart,
    render_row,
)
from stockledger.services.charting.sampler import sample_dates
from stockledger.services.constants import DEFAULT_CHART_SYMBOLS, is_valid_ticker
from stockledger.services.exceptions import InvalidTickerError, ValidationError
from stockledger.services.ledger.ledger import Ledger
from stockledger.services.market_data.base import Direction, PriceProvider
from stockledger.services.valuation.calculators import exact_close
from stockledger.utils.date_utils import format_iso_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartRow:
    label: str
    date: date
    value: Decimal
    bar: str


@dataclass
class ChartResult:
    """
    A rendered chart together with the numbers behind it.

    Attributes:
        title: First line of the chart
        granularity: Spacing of the rows
        scale: Base and units per symbol
        is_absolute: False for charts scaled from the smallest value
        rows: One row per sample date, oldest first
    """

    title: str
    granularity: Granularity
    scale: Scale
    is_absolute: bool
    rows: list[ChartRow] = field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        return self.render().split("\n")

    def render(self) -> str:
        return render_chart(
            self.title,
            [(row.label, row.value) for row in self.rows],
            self.scale,
            self.is_absolute,
        )


class PerformanceChartService:
    """
    Charts a ticker's closes or a ledger's value over a date range.

    Attributes:
        _prices: Injected price provider
        _max_symbols: Width of the longest bar
    """

    def __init__(self, prices: PriceProvider, max_symbols: int = DEFAULT_CHART_SYMBOLS) -> None:
        self._prices = prices
        self._max_symbols = max_symbols

    def stock_chart(self, ticker: str, start: date, end: date, is_absolute: bool = True) -> ChartResult:
        """
        Closing prices of a ticker between start and end.

        Raises:
            InvalidTickerError: Malformed ticker
            InvalidRangeError: start > end
            NoDataInRangeError: No trading day in range
        """
        if not is_valid_ticker(ticker):
            raise InvalidTickerError(ticker)

        granularity = choose_granularity(start, end)
        dates = sample_dates(start, end, ticker, granularity, self._prices)
        values = [exact_close(ticker, d, self._prices) for d in dates]

        title = (
            f"Performance of stock '{ticker}' from "
            f"{format_iso_date(start)} to {format_iso_date(end)}:"
        )
        logger.info(f"Charting {ticker} from {start} to {end}: {len(dates)} rows")
        return self._build(title, granularity, dates, values, is_absolute)

    def portfolio_chart(self, ledger: Ledger, start: date, end: date, is_absolute: bool = True) -> ChartResult:
        """
        Value of a ledger between start and end.

        Rows follow the trading calendar of the first holding. At each
        sample a holding counts when it was added on or before that date,
        valued at the latest close on or before it. The ledger's watermark
        is not touched.

        Raises:
            ValidationError: The ledger has no holdings
        """
        holdings = ledger.holdings
        if not holdings:
            raise ValidationError(f"Portfolio '{ledger.name}' has no holdings to chart", field="name")

        granularity = choose_granularity(start, end)
        dates = sample_dates(start, end, holdings[0].ticker, granularity, self._prices)

        values = []
        for d in dates:
            total = Decimal(0)
            for holding in holdings:
                if holding.date_added <= d:
                    # Series that stop early keep their last close
                    _, newest = self._prices.date_bounds(holding.ticker)
                    record = self._prices.get_or_nearest(holding.ticker, min(d, newest), Direction.BACKWARD)
                    total += record.close * holding.shares
            values.append(total)

        title = (
            f"Performance of portfolio '{ledger.name}' from "
            f"{format_iso_date(start)} to {format_iso_date(end)}:"
        )
        logger.info(f"Charting portfolio '{ledger.name}' from {start} to {end}: {len(dates)} rows")
        return self._build(title, granularity, dates, values, is_absolute)

    def _build(
            self,
            title: str,
            granularity: Granularity,
            dates: list[date],
            values: list[Decimal],
            is_absolute: bool,
    ) -> ChartResult:
        scale = default_scale(values, is_absolute, self._max_symbols)
        rows = [
            ChartRow(
                label=format_label(granularity, d),
                date=d,
                value=value,
                bar=render_row(value, scale),
            )
            for d, value in zip(dates, values)
        ]
        return ChartResult(title=title, granularity=granularity, scale=scale, is_absolute=is_absolute, rows=rows)
