# backend/stockledger/services/market_data/base.py
"""
Abstract interface for historical price providers.

Every provider serves the full daily history of a ticker as an ascending
list of PriceRecord. The base class layers the lookups the ledger and the
valuation engine need on top of that single primitive:

- get_series: full history, sorted oldest first
- get_record: exact record on a date (or None)
- date_bounds: oldest and newest known dates
- get_or_nearest: closest trading day when walking forward or backward

Subclasses implement only `name` and `_load_series`. Loaded series are
memoised per ticker, so repeated lookups during a chart or a moving average
never go back to the source.

Retry Behavior:
    `_execute_with_retry` wraps remote calls with exponential backoff for
    ProviderUnavailableError and RateLimitError. TickerNotFoundError is
    permanent and is never retried.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import TypeVar, Callable, Any

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from stockledger.services.exceptions import (
    NoDataInRangeError,
    ProviderUnavailableError,
    RateLimitError,
    TickerNotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# DATA TRANSFER OBJECTS
# =============================================================================

@dataclass(frozen=True)
class PriceRecord:
    """
    One trading day of a ticker's history.

    Attributes:
        date: Trading date
        open: Opening price
        high: Highest price of the day
        low: Lowest price of the day
        close: Closing price (the value used for every valuation)
        volume: Shares traded
    """

    date: date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int = 0

    def __post_init__(self) -> None:
        """Validate price data."""
        if self.close <= 0:
            raise ValueError(f"close price must be positive, got {self.close}")
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) cannot be less than low ({self.low})")


class Direction(str, Enum):
    """Which way to walk when a date is not a trading day."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def step(self) -> timedelta:
        return timedelta(days=1 if self is Direction.FORWARD else -1)


@dataclass(frozen=True)
class _SeriesIndex:
    records: tuple[PriceRecord, ...]
    by_date: dict[date, PriceRecord]

    @property
    def oldest(self) -> date:
        return self.records[0].date

    @property
    def newest(self) -> date:
        return self.records[-1].date


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class PriceProvider(ABC):
    """
    Abstract base class for daily price providers.

    Subclasses can override the retry configuration by setting class attributes:

    - MAX_RETRY_ATTEMPTS: Total attempts (default: 3)
    - RETRY_MIN_WAIT: Minimum wait in seconds (default: 1)
    - RETRY_MAX_WAIT: Maximum wait in seconds (default: 10)
    - RETRY_MULTIPLIER: Exponential multiplier (default: 1)
    """

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10
    RETRY_MULTIPLIER: int = 1

    def __init__(self) -> None:
        self._series_cache: dict[str, _SeriesIndex] = {}
        self._cache_lock = threading.Lock()

    # =========================================================================
    # ABSTRACT PROPERTIES AND METHODS
    # =========================================================================

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this provider.

        Used for logging and error messages.
        """
        pass

    @abstractmethod
    def _load_series(self, ticker: str) -> list[PriceRecord]:
        """
        Load the complete daily history of a ticker, in any order.

        Raises:
            TickerNotFoundError: The source has no data for the ticker
            ProviderUnavailableError: Network or source error (retryable)
            RateLimitError: Rate limit exceeded (retryable)
        """
        pass

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_series(self, ticker: str) -> list[PriceRecord]:
        """
        Return the full history of a ticker, oldest first.

        Raises:
            TickerNotFoundError: No data for the ticker
        """
        return list(self._index(ticker).records)

    def get_record(self, ticker: str, on: date) -> PriceRecord | None:
        """Return the record on an exact date, or None if it wasn't a trading day."""
        return self._index(ticker).by_date.get(on)

    def date_bounds(self, ticker: str) -> tuple[date, date]:
        """Return (oldest, newest) trading dates of the ticker."""
        index = self._index(ticker)
        return index.oldest, index.newest

    def get_or_nearest(self, ticker: str, on: date, direction: Direction) -> PriceRecord:
        """
        Return the record on `on`, or the nearest trading day in `direction`.

        The walk moves one calendar day at a time and stops at the series
        bounds.

        Raises:
            NoDataInRangeError: The walk left the known history
        """
        index = self._index(ticker)
        current = on
        while index.oldest <= current <= index.newest:
            record = index.by_date.get(current)
            if record is not None:
                return record
            current += direction.step
        raise NoDataInRangeError(ticker, on)

    def clear_cache(self, ticker: str | None = None) -> None:
        """Forget memoised series (all tickers when ticker is None)."""
        with self._cache_lock:
            if ticker is None:
                self._series_cache.clear()
            else:
                self._series_cache.pop(ticker.upper(), None)

    def _index(self, ticker: str) -> _SeriesIndex:
        key = ticker.upper()
        with self._cache_lock:
            cached = self._series_cache.get(key)
        if cached is not None:
            return cached

        records = sorted(self._load_series(key), key=lambda r: r.date)
        if not records:
            raise TickerNotFoundError(key, self.name)

        index = _SeriesIndex(records=tuple(records), by_date={r.date: r for r in records})
        with self._cache_lock:
            self._series_cache[key] = index
        logger.debug(
            f"Loaded {len(records)} records for {key} from {self.name} "
            f"({index.oldest} to {index.newest})"
        )
        return index

    # =========================================================================
    # RETRY HELPER METHOD
    # =========================================================================

    def _execute_with_retry(
            self,
            func: Callable[..., T],
            *args: Any,
            **kwargs: Any,
    ) -> T:
        """
        Execute a function with retry logic for transient failures.

        Uses exponential backoff for retryable exceptions:
        - ProviderUnavailableError
        - RateLimitError

        Raises:
            The last exception if all retries fail
        """

        @retry(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type((ProviderUnavailableError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner() -> T:
            return func(*args, **kwargs)

        return _inner()
