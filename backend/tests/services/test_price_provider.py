# backend/tests/services/test_price_provider.py
"""
Tests for the PriceProvider base class.

Covers:
- PriceRecord validation
- Sorting, exact lookups and bounds
- get_or_nearest in both directions
- Per-ticker memoisation
- Retry behaviour of _execute_with_retry
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from stockledger.services.exceptions import (
    NoDataInRangeError,
    ProviderUnavailableError,
    RateLimitError,
    TickerNotFoundError,
)
from stockledger.services.market_data import Direction, PriceProvider, PriceRecord
from tests.conftest import InMemoryPriceProvider, make_record


# =============================================================================
# PRICE RECORD
# =============================================================================

class TestPriceRecord:
    """Tests for PriceRecord validation."""

    def test_valid(self):
        record = PriceRecord(date(2024, 1, 2), Decimal("1"), Decimal("2"), Decimal("0.5"), Decimal("1.5"), 10)

        assert record.close == Decimal("1.5")

    @pytest.mark.parametrize("close", [Decimal("0"), Decimal("-1")])
    def test_close_must_be_positive(self, close):
        with pytest.raises(ValueError):
            PriceRecord(date(2024, 1, 2), Decimal("1"), Decimal("2"), Decimal("0.5"), close)

    def test_high_not_below_low(self):
        with pytest.raises(ValueError):
            PriceRecord(date(2024, 1, 2), Decimal("1"), Decimal("1"), Decimal("2"), Decimal("1.5"))


# =============================================================================
# LOOKUPS
# =============================================================================

class TestLookups:
    """Tests for get_series, get_record and date_bounds."""

    def test_series_sorted_oldest_first(self):
        prices = InMemoryPriceProvider({
            "XYZ": [make_record(date(2024, 1, 3), 3), make_record(date(2024, 1, 1), 1)],
        })

        assert [r.date for r in prices.get_series("XYZ")] == [date(2024, 1, 1), date(2024, 1, 3)]

    def test_get_record(self, prices):
        assert prices.get_record("GOOG", date(2023, 1, 5)).close == Decimal("110")
        assert prices.get_record("GOOG", date(2023, 1, 7)) is None

    def test_date_bounds(self, prices):
        assert prices.date_bounds("GOOG") == (date(2023, 1, 4), date(2023, 1, 6))

    def test_unknown_ticker(self, prices):
        with pytest.raises(TickerNotFoundError):
            prices.get_series("NOPE")

    def test_empty_series_is_unknown(self):
        prices = InMemoryPriceProvider({"EMPT": []})

        with pytest.raises(TickerNotFoundError):
            prices.date_bounds("EMPT")


class TestGetOrNearest:
    """Tests for walking to the nearest trading day."""

    def test_exact_date(self, prices):
        assert prices.get_or_nearest("AAL", date(2023, 5, 3), Direction.FORWARD).date == date(2023, 5, 3)

    def test_forward_over_weekend(self, prices):
        assert prices.get_or_nearest("AAL", date(2023, 5, 6), Direction.FORWARD).date == date(2023, 5, 8)

    def test_backward_over_weekend(self, prices):
        assert prices.get_or_nearest("AAL", date(2023, 5, 7), Direction.BACKWARD).date == date(2023, 5, 5)

    def test_walk_leaves_history(self, prices):
        with pytest.raises(NoDataInRangeError):
            prices.get_or_nearest("GOOG", date(2023, 1, 7), Direction.FORWARD)

    def test_backward_before_history(self, prices):
        with pytest.raises(NoDataInRangeError):
            prices.get_or_nearest("GOOG", date(2023, 1, 3), Direction.BACKWARD)

    def test_direction_steps(self):
        assert Direction.FORWARD.step == timedelta(days=1)
        assert Direction.BACKWARD.step == timedelta(days=-1)


class TestCaching:
    """Series are loaded once per ticker."""

    def test_loaded_once(self, prices):
        prices.get_record("AAL", date(2023, 5, 1))
        prices.get_record("AAL", date(2023, 5, 2))
        prices.date_bounds("AAL")

        assert prices.load_counts == {"AAL": 1}

    def test_lookup_is_case_insensitive(self, prices):
        prices.get_series("aal")
        prices.get_series("AAL")

        assert prices.load_counts == {"AAL": 1}

    def test_clear_cache(self, prices):
        prices.get_series("AAL")
        prices.get_series("MSFT")

        prices.clear_cache("AAL")
        prices.get_series("AAL")
        prices.get_series("MSFT")

        assert prices.load_counts == {"AAL": 2, "MSFT": 1}

    def test_clear_all(self, prices):
        prices.get_series("AAL")
        prices.clear_cache()
        prices.get_series("AAL")

        assert prices.load_counts["AAL"] == 2


# =============================================================================
# RETRY
# =============================================================================

class FlakyProvider(PriceProvider):
    """Fails a set number of times before returning data."""

    RETRY_MIN_WAIT = 0
    RETRY_MAX_WAIT = 0

    def __init__(self, failures: list[Exception]) -> None:
        super().__init__()
        self._failures = list(failures)
        self.attempts = 0

    @property
    def name(self) -> str:
        return "flaky"

    def _load_series(self, ticker: str) -> list[PriceRecord]:
        return self._execute_with_retry(self._fetch, ticker)

    def _fetch(self, ticker: str) -> list[PriceRecord]:
        self.attempts += 1
        if self._failures:
            raise self._failures.pop(0)
        return [make_record(date(2024, 1, 2), 10)]


class TestRetry:
    """Tests for _execute_with_retry."""

    def test_recovers_from_transient_failures(self):
        provider = FlakyProvider([
            ProviderUnavailableError("flaky", "timeout"),
            RateLimitError("flaky"),
        ])

        assert len(provider.get_series("XYZ")) == 1
        assert provider.attempts == 3

    def test_gives_up_after_max_attempts(self):
        provider = FlakyProvider([ProviderUnavailableError("flaky", "down")] * 3)

        with pytest.raises(ProviderUnavailableError):
            provider.get_series("XYZ")

        assert provider.attempts == 3

    def test_ticker_not_found_is_not_retried(self):
        provider = FlakyProvider([TickerNotFoundError("XYZ", "flaky")])

        with pytest.raises(TickerNotFoundError):
            provider.get_series("XYZ")

        assert provider.attempts == 1
