# backend/stockledger/services/market_data/__init__.py
"""
Price data package.

This package contains:
- Abstract interface for price providers (base.py)
- CSV file cache (csv_cache.py)
- Yahoo Finance implementation (yahoo.py)

Usage:
    from stockledger.services.market_data import (
        PriceProvider,
        PriceRecord,
        Direction,
        CsvCachePriceProvider,
        YahooFinancePriceProvider,
    )

Architecture:
    PriceProvider (ABC)
    ├── CsvCachePriceProvider (reads <TICKER>.csv, fills from upstream)
    └── YahooFinancePriceProvider (yfinance, retried with tenacity)
"""

from stockledger.services.market_data.base import (
    PriceProvider,
    PriceRecord,
    Direction,
)
from stockledger.services.market_data.csv_cache import CsvCachePriceProvider
from stockledger.services.market_data.yahoo import YahooFinancePriceProvider

__all__ = [
    "PriceProvider",
    "PriceRecord",
    "Direction",
    "CsvCachePriceProvider",
    "YahooFinancePriceProvider",
]
