# backend/stockledger/services/market_data/yahoo.py
"""
Yahoo Finance price provider.

Fetches the complete daily history of a ticker with the yfinance library.
Prices are raw closes (auto_adjust=False) so that values match what the
market printed on each trading day.

Limitations:
- Rate limits (not officially documented, but exist)
- Not suitable for high-frequency use; wrap it in CsvCachePriceProvider
"""

import logging

import yfinance as yf

from stockledger.services.exceptions import (
    ProviderUnavailableError,
    TickerNotFoundError,
    RateLimitError,
)
from stockledger.services.market_data.base import PriceProvider, PriceRecord
from stockledger.services.market_data.frames import frame_to_records

logger = logging.getLogger(__name__)


class YahooFinancePriceProvider(PriceProvider):
    """
    Yahoo Finance implementation of PriceProvider.

    Configuration:
        timeout: API request timeout in seconds (default: 10)

    Retry Behavior (inherited from PriceProvider):
        Transient failures are retried up to 3 times with exponential backoff.

    Example:
        provider = YahooFinancePriceProvider()
        provider.get_record("AAPL", date(2024, 1, 2))
    """

    def __init__(self, timeout: int = 10) -> None:
        """
        Initialize the Yahoo Finance provider.

        Args:
            timeout: Request timeout in seconds
        """
        super().__init__()
        self._timeout = timeout
        logger.info(f"YahooFinancePriceProvider initialized (timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "yahoo"

    def _load_series(self, ticker: str) -> list[PriceRecord]:
        return self._execute_with_retry(self._fetch_history, ticker)

    def _fetch_history(self, ticker: str) -> list[PriceRecord]:
        """Download the full daily history and convert it to records."""
        ticker = ticker.strip().upper()
        logger.debug(f"Fetching full price history for {ticker}")

        try:
            df = yf.Ticker(ticker).history(
                period="max",
                interval="1d",
                auto_adjust=False,
                timeout=self._timeout,
            )
        except Exception as e:
            error_str = str(e).lower()

            if "not found" in error_str or "no data" in error_str or "delisted" in error_str:
                raise TickerNotFoundError(ticker=ticker, provider=self.name)

            if "rate limit" in error_str or "too many requests" in error_str:
                raise RateLimitError(provider=self.name)

            logger.error(f"Yahoo Finance error for {ticker}: {e}")
            raise ProviderUnavailableError(provider=self.name, reason=str(e))

        if df is None or df.empty:
            raise TickerNotFoundError(ticker=ticker, provider=self.name)

        df = df.rename(columns=str.lower)
        prices = frame_to_records(df)
        if not prices:
            raise TickerNotFoundError(ticker=ticker, provider=self.name)

        logger.debug(f"Fetched {len(prices)} days for {ticker}")
        return prices
