# backend/tests/services/test_yahoo_provider.py
"""
Tests for the YahooFinancePriceProvider.

This module tests:
- Provider configuration
- Conversion of yfinance history frames to PriceRecords
- Error handling and classification

Note: These tests mock the yfinance library to avoid actual API calls.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from stockledger.services.exceptions import (
    ProviderUnavailableError,
    RateLimitError,
    TickerNotFoundError,
)
from stockledger.services.market_data import YahooFinancePriceProvider

YF_TICKER = "stockledger.services.market_data.yahoo.yf.Ticker"


class NoWaitYahooProvider(YahooFinancePriceProvider):
    RETRY_MIN_WAIT = 0
    RETRY_MAX_WAIT = 0


def history_frame() -> pd.DataFrame:
    """A frame shaped like yfinance's history() output."""
    index = pd.DatetimeIndex(
        ["2024-01-02", "2024-01-03", "2024-01-04"],
        name="Date",
    ).tz_localize("America/New_York")
    return pd.DataFrame(
        {
            "Open": [185.0, 184.2, 182.1],
            "High": [188.4, 185.9, 183.1],
            "Low": [183.9, 183.4, 180.9],
            "Close": [185.64, 184.25, None],
            "Adj Close": [184.9, 183.5, 181.2],
            "Volume": [82488700, 58414500, 71983600],
            "Dividends": [0.0, 0.0, 0.0],
            "Stock Splits": [0.0, 0.0, 0.0],
        },
        index=index,
    )


def mock_ticker(history=None, error=None) -> MagicMock:
    ticker = MagicMock()
    if error is not None:
        ticker.history.side_effect = error
    else:
        ticker.history.return_value = history
    return ticker


# =============================================================================
# PROVIDER INITIALIZATION
# =============================================================================

class TestYahooProviderInit:
    """Tests for provider initialization."""

    def test_provider_name(self):
        assert YahooFinancePriceProvider().name == "yahoo"

    def test_default_timeout(self):
        assert YahooFinancePriceProvider()._timeout == 10

    def test_custom_timeout(self):
        assert YahooFinancePriceProvider(timeout=30)._timeout == 30


# =============================================================================
# HISTORY CONVERSION
# =============================================================================

class TestHistory:
    """Tests for turning history() frames into records."""

    def test_records_from_frame(self):
        with patch(YF_TICKER, return_value=mock_ticker(history_frame())) as ticker_cls:
            series = YahooFinancePriceProvider().get_series("AAPL")

        ticker_cls.assert_called_once_with("AAPL")
        assert [r.date for r in series] == [date(2024, 1, 2), date(2024, 1, 3)]
        assert series[0].close == Decimal("185.64")
        assert series[0].volume == 82488700

    def test_requests_full_unadjusted_history(self):
        ticker = mock_ticker(history_frame())
        with patch(YF_TICKER, return_value=ticker):
            YahooFinancePriceProvider(timeout=5).get_series("AAPL")

        ticker.history.assert_called_once_with(
            period="max", interval="1d", auto_adjust=False, timeout=5,
        )

    def test_rows_without_close_are_skipped(self):
        with patch(YF_TICKER, return_value=mock_ticker(history_frame())):
            provider = YahooFinancePriceProvider()

            assert provider.get_record("AAPL", date(2024, 1, 4)) is None

    def test_history_is_memoised(self):
        ticker = mock_ticker(history_frame())
        with patch(YF_TICKER, return_value=ticker):
            provider = YahooFinancePriceProvider()
            provider.get_series("AAPL")
            provider.get_record("AAPL", date(2024, 1, 2))

        assert ticker.history.call_count == 1


# =============================================================================
# ERROR HANDLING
# =============================================================================

class TestErrorHandling:
    """Tests for error classification."""

    def test_empty_frame_is_unknown_ticker(self):
        with patch(YF_TICKER, return_value=mock_ticker(pd.DataFrame())):
            with pytest.raises(TickerNotFoundError):
                YahooFinancePriceProvider().get_series("ZZZZ")

    @pytest.mark.parametrize("message", [
        "No data found, symbol may be delisted",
        "Ticker ZZZZ not found",
    ])
    def test_not_found_messages(self, message):
        with patch(YF_TICKER, return_value=mock_ticker(error=Exception(message))):
            with pytest.raises(TickerNotFoundError):
                YahooFinancePriceProvider().get_series("ZZZZ")

    def test_rate_limit_retried_then_raised(self):
        ticker = mock_ticker(error=Exception("Too Many Requests. Rate limited."))
        with patch(YF_TICKER, return_value=ticker):
            with pytest.raises(RateLimitError):
                NoWaitYahooProvider().get_series("AAPL")

        assert ticker.history.call_count == NoWaitYahooProvider.MAX_RETRY_ATTEMPTS

    def test_other_errors_mean_unavailable(self):
        with patch(YF_TICKER, return_value=mock_ticker(error=Exception("Connection reset"))):
            with pytest.raises(ProviderUnavailableError) as exc_info:
                NoWaitYahooProvider().get_series("AAPL")

        assert exc_info.value.provider == "yahoo"

    def test_transient_error_recovers(self):
        ticker = MagicMock()
        ticker.history.side_effect = [Exception("Read timed out"), history_frame()]
        with patch(YF_TICKER, return_value=ticker):
            series = NoWaitYahooProvider().get_series("AAPL")

        assert len(series) == 2
