# backend/stockledger/services/market_data/csv_cache.py
"""
Local CSV price cache.

Each ticker lives in `<cache_dir>/<TICKER>.csv` with the columns
`timestamp,open,high,low,close,volume` (a `date` column is accepted in
place of `timestamp`, and rows may be in any order). When a file is
missing and an upstream provider is configured, the history is fetched
once, written to disk and served from the file from then on.
"""

import logging
from pathlib import Path

import pandas as pd

from stockledger.services.exceptions import (
    ProviderUnavailableError,
    TickerNotFoundError,
)
from stockledger.services.market_data.base import PriceProvider, PriceRecord
from stockledger.services.market_data.frames import frame_to_records, records_to_frame

logger = logging.getLogger(__name__)

DATE_COLUMNS = ("timestamp", "date")


class CsvCachePriceProvider(PriceProvider):
    """
    Serves price history from CSV files, filling misses from `upstream`.

    Args:
        cache_dir: Directory holding <TICKER>.csv files (created on first write)
        upstream: Provider consulted when a file is missing (optional)
    """

    def __init__(self, cache_dir: Path | str, upstream: PriceProvider | None = None) -> None:
        super().__init__()
        self._cache_dir = Path(cache_dir)
        self._upstream = upstream

    @property
    def name(self) -> str:
        if self._upstream is not None:
            return f"csv_cache+{self._upstream.name}"
        return "csv_cache"

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, ticker: str) -> Path:
        return self._cache_dir / f"{ticker.upper()}.csv"

    def _load_series(self, ticker: str) -> list[PriceRecord]:
        path = self.path_for(ticker)

        if path.exists():
            logger.debug(f"Price cache hit for {ticker}: {path}")
            return self._read_csv(ticker, path)

        if self._upstream is None:
            raise TickerNotFoundError(ticker=ticker, provider=self.name)

        logger.debug(f"Price cache miss for {ticker}, fetching from {self._upstream.name}")
        records = self._upstream.get_series(ticker)
        self._write_csv(path, records)
        return records

    def _read_csv(self, ticker: str, path: Path) -> list[PriceRecord]:
        try:
            df = pd.read_csv(path)
        except pd.errors.EmptyDataError:
            raise TickerNotFoundError(ticker=ticker, provider=self.name)
        except (pd.errors.ParserError, OSError) as e:
            logger.error(f"Unreadable price file {path}: {e}")
            raise ProviderUnavailableError(provider=self.name, reason=str(e))

        df.columns = [str(c).strip().lower() for c in df.columns]
        date_column = next((c for c in DATE_COLUMNS if c in df.columns), None)
        if date_column is None or "close" not in df.columns:
            raise ProviderUnavailableError(
                provider=self.name,
                reason=f"{path.name} needs a timestamp (or date) and a close column",
            )

        df[date_column] = pd.to_datetime(df[date_column], format="%Y-%m-%d")
        df = df.set_index(date_column)
        return frame_to_records(df)

    def _write_csv(self, path: Path, records: list[PriceRecord]) -> None:
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        records_to_frame(records).to_csv(path, index=False)
        logger.info(f"Cached {len(records)} price records to {path}")
