# backend/stockledger/services/ledger/ledger.py
"""
The Ledger: a named set of holdings with a chronology watermark.

Chronology:
    A ledger remembers the most recent date any operation was performed
    at (the watermark). Every mutating call and every date-scoped read
    must use a date on or after it, otherwise
    NonChronologicalOperationError is raised and nothing changes. A
    successful call moves the watermark to its date; reads included.

All validation happens before the first mutation, so a failed call
leaves holdings and watermark exactly as they were.
"""

import logging
from datetime import date
from decimal import Decimal

from stockledger.services.constants import is_valid_ticker
from stockledger.services.exceptions import (
    FutureDateError,
    InsufficientSharesError,
    InvalidNameError,
    InvalidSharesError,
    InvalidTickerError,
    NonChronologicalOperationError,
    UnknownTickerError,
    UnknownTradingDateError,
)
from stockledger.services.ledger.types import Holding, LedgerSnapshot
from stockledger.services.market_data.base import PriceProvider
from stockledger.services.valuation.calculators import holding_value

logger = logging.getLogger(__name__)


def to_shares(value: Decimal | int | str) -> Decimal:
    """Coerce a share count to Decimal without going through float."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class Ledger:
    """
    A named portfolio of holdings, one per ticker, in insertion order.

    Example:
        ledger = Ledger("Retirement")
        ledger.update_holding("AAL", 3, date(2023, 5, 1), True, prices)
        ledger.composition(date(2023, 5, 2))  # {"AAL": Decimal("3")}
    """

    def __init__(
            self,
            name: str,
            holdings: list[Holding] | tuple[Holding, ...] = (),
            watermark: date | None = None,
    ) -> None:
        if name is None or not name.strip():
            raise InvalidNameError(name)
        self._name = name
        self._holdings: list[Holding] = list(holdings)
        self._watermark = watermark

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def name(self) -> str:
        return self._name

    @property
    def watermark(self) -> date | None:
        return self._watermark

    @property
    def holdings(self) -> tuple[Holding, ...]:
        return tuple(self._holdings)

    def is_empty(self) -> bool:
        return not self._holdings

    def get_holding(self, ticker: str) -> Holding | None:
        for holding in self._holdings:
            if holding.ticker == ticker:
                return holding
        return None

    # =========================================================================
    # CHRONOLOGY
    # =========================================================================

    def check_chronology(self, on: date) -> None:
        """Raise NonChronologicalOperationError if `on` precedes the watermark."""
        if self._watermark is not None and on < self._watermark:
            logger.warning(
                f"Rejected non-chronological operation on '{self._name}': "
                f"{on} is before {self._watermark}"
            )
            raise NonChronologicalOperationError(self._name, on, self._watermark)

    def touch_watermark(self, on: date) -> None:
        """
        Validate chronology for `on` and advance the watermark to it.

        This is the only place the watermark moves.
        """
        self.check_chronology(on)
        self._watermark = on

    # =========================================================================
    # MUTATION
    # =========================================================================

    def update_holding(
            self,
            ticker: str,
            shares: Decimal | int | str,
            on: date,
            is_buy: bool,
            prices: PriceProvider,
    ) -> None:
        """
        Buy or sell shares of a ticker on a trading date.

        Buying into an existing holding, or selling part of one, stamps the
        holding with `on` as its new date_added. Selling the whole position
        removes the holding.

        Raises:
            InvalidTickerError: Ticker isn't 1-4 uppercase letters
            InvalidSharesError: shares <= 0
            UnknownTradingDateError: `on` isn't a trading day of the ticker
            NonChronologicalOperationError: `on` precedes the watermark
            UnknownTickerError: Selling a ticker that isn't held
            InsufficientSharesError: Selling more than is held
        """
        if not is_valid_ticker(ticker):
            raise InvalidTickerError(ticker)

        shares = to_shares(shares)
        if shares <= 0:
            raise InvalidSharesError(shares)

        if prices.get_record(ticker, on) is None:
            raise UnknownTradingDateError(ticker, on)

        self.check_chronology(on)

        existing = self.get_holding(ticker)
        if is_buy:
            if existing is None:
                self._holdings.append(Holding(ticker=ticker, shares=shares, date_added=on))
            else:
                self._replace(existing, Holding(ticker, existing.shares + shares, on))
        else:
            if existing is None:
                raise UnknownTickerError(ticker, self._name)
            if shares > existing.shares:
                raise InsufficientSharesError(ticker, shares, existing.shares)

            remaining = existing.shares - shares
            if remaining == 0:
                self._holdings.remove(existing)
            else:
                self._replace(existing, Holding(ticker, remaining, on))

        self.touch_watermark(on)

    def _replace(self, old: Holding, new: Holding) -> None:
        self._holdings[self._holdings.index(old)] = new

    # =========================================================================
    # VALUATION
    # =========================================================================

    def total_value(self, on: date, prices: PriceProvider, today: date | None = None) -> Decimal:
        """
        Value of every holding on `on` at that day's closing prices.

        An empty ledger is worth 0 without consulting prices.

        Raises:
            FutureDateError: `on` is after today
            NonChronologicalOperationError: `on` precedes the watermark
            PriceNotFoundError: A held ticker has no close on `on`
        """
        self._check_not_future(on, today)
        self.check_chronology(on)

        total = Decimal(0)
        for holding in self._holdings:
            total += holding_value(holding, on, prices)

        self.touch_watermark(on)
        return total

    def composition(self, on: date, today: date | None = None) -> dict[str, Decimal]:
        """
        Shares per ticker for holdings added on or before `on`.

        `on` doesn't need to be a trading day.
        """
        self._check_not_future(on, today)
        self.check_chronology(on)

        result = {h.ticker: h.shares for h in self._holdings if h.date_added <= on}

        self.touch_watermark(on)
        return result

    def distribution(
            self,
            on: date,
            prices: PriceProvider,
            today: date | None = None,
    ) -> dict[str, Decimal]:
        """Value per ticker on `on`, leaving out holdings worth nothing yet."""
        self._check_not_future(on, today)
        self.check_chronology(on)

        result = {}
        for holding in self._holdings:
            value = holding_value(holding, on, prices)
            if value > 0:
                result[holding.ticker] = value

        self.touch_watermark(on)
        return result

    @staticmethod
    def _check_not_future(on: date, today: date | None) -> None:
        today = today or date.today()
        if on > today:
            raise FutureDateError(on, today)

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            name=self._name,
            watermark=self._watermark,
            holdings=tuple(self._holdings),
        )

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> "Ledger":
        return cls(snapshot.name, snapshot.holdings, snapshot.watermark)

    def copy(self) -> "Ledger":
        return Ledger.from_snapshot(self.snapshot())

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Adopt the state of a snapshot (holdings and watermark)."""
        self._holdings = list(snapshot.holdings)
        self._watermark = snapshot.watermark

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __repr__(self) -> str:
        return (
            f"Ledger(name={self._name!r}, holdings={len(self._holdings)}, "
            f"watermark={self._watermark})"
        )
