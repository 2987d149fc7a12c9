# backend/stockledger/services/valuation/__init__.py
"""
Valuation engine package.

Usage:
    from stockledger.services.valuation import (
        StockAnalysisService,
        RebalanceCalculator,
        holding_value,
    )

Architecture:
    valuation/
    ├── __init__.py        # This file - package exports
    ├── types.py           # RebalanceTrade, TradeSide
    ├── calculators.py     # holding_value, gain/loss, moving average, crossover
    ├── rebalance.py       # RebalanceCalculator (plan + apply)
    └── service.py         # StockAnalysisService (single-ticker queries)

Data Flow:
    Ledger + PriceProvider → holding_value → total/distribution
    Ledger + weights → RebalanceCalculator.plan → trades → apply
    PriceProvider → MovingAverageCalculator → CrossoverCalculator
"""

from stockledger.services.valuation.calculators import (
    holding_value,
    exact_close,
    GainLossCalculator,
    MovingAverageCalculator,
    CrossoverCalculator,
)
from stockledger.services.valuation.rebalance import RebalanceCalculator
from stockledger.services.valuation.service import StockAnalysisService
from stockledger.services.valuation.types import RebalanceTrade, TradeSide

__all__ = [
    "holding_value",
    "exact_close",
    "GainLossCalculator",
    "MovingAverageCalculator",
    "CrossoverCalculator",
    "RebalanceCalculator",
    "StockAnalysisService",
    "RebalanceTrade",
    "TradeSide",
]
