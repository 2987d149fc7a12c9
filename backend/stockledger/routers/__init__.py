# backend/stockledger/routers/__init__.py
"""
API routers for Stock Ledger.

Each router handles a specific domain:
- portfolios: Ledgers (trades, valuation, rebalancing, charts, save/load)
- stocks: Single-ticker analysis (gain/loss, moving average, crossovers, charts)
"""

from stockledger.routers.portfolios import router as portfolios_router
from stockledger.routers.stocks import router as stocks_router

__all__ = [
    "portfolios_router",
    "stocks_router",
]
