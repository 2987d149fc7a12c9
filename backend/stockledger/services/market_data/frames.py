# backend/stockledger/services/market_data/frames.py
"""
pandas <-> PriceRecord conversion shared by the CSV cache and Yahoo providers.

Both sources end up as a DataFrame indexed by date with lowercase
open/high/low/close/volume columns; everything downstream works on
PriceRecord.
"""

import logging
import math
from decimal import Decimal
from typing import Any

import pandas as pd

from stockledger.services.market_data.base import PriceRecord

logger = logging.getLogger(__name__)

PRICE_QUANTUM = Decimal("0.00000001")

CSV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


def to_decimal(value: Any) -> Decimal | None:
    """Convert a value to Decimal, returning None for NaN/None."""
    if value is None:
        return None
    try:
        if math.isnan(float(value)):
            return None
        return Decimal(str(value)).quantize(PRICE_QUANTUM)
    except (TypeError, ValueError):
        return None


def to_int(value: Any) -> int | None:
    """Convert a value to int, returning None for NaN/None."""
    if value is None:
        return None
    try:
        if math.isnan(float(value)):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def frame_to_records(df: pd.DataFrame) -> list[PriceRecord]:
    """
    Convert a date-indexed OHLCV DataFrame into PriceRecords.

    Rows without a close price are skipped; a missing open/high/low falls
    back to the close.
    """
    prices = []

    for idx, row in df.iterrows():
        price_date = idx.date() if hasattr(idx, "date") else idx
        close_price = to_decimal(row.get("close"))

        if close_price is None:
            logger.warning(f"Skipping {price_date}: missing close price")
            continue

        open_price = to_decimal(row.get("open"))
        high_price = to_decimal(row.get("high"))
        low_price = to_decimal(row.get("low"))

        try:
            prices.append(PriceRecord(
                date=price_date,
                open=open_price if open_price is not None else close_price,
                high=high_price if high_price is not None else close_price,
                low=low_price if low_price is not None else close_price,
                close=close_price,
                volume=to_int(row.get("volume")) or 0,
            ))
        except ValueError as e:
            logger.warning(f"Error parsing row {price_date}: {e}")

    return prices


def records_to_frame(records: list[PriceRecord]) -> pd.DataFrame:
    """Build a CSV-ready DataFrame (newest first, like the downloaded files)."""
    rows = [
        {
            "timestamp": r.date.isoformat(),
            "open": str(r.open),
            "high": str(r.high),
            "low": str(r.low),
            "close": str(r.close),
            "volume": r.volume,
        }
        for r in sorted(records, key=lambda r: r.date, reverse=True)
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)
