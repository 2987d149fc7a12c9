# backend/stockledger/services/valuation/types.py
"""
Internal data types for the valuation engine.

These dataclasses are NOT Pydantic schemas; the API representations live
in stockledger/schemas.

Design Principles:
- Immutable value objects (frozen=True)
- Decimal for ALL financial values (never float)
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class RebalanceTrade:
    """
    One trade needed to move a holding to its target weight.

    Attributes:
        ticker: Holding being adjusted
        side: BUY when the holding is under target, SELL when over
        shares: |actual - target| / price per share
        target_value: total value x weight / 100
        actual_value: The holding's value before rebalancing
    """

    ticker: str
    side: TradeSide
    shares: Decimal
    target_value: Decimal
    actual_value: Decimal

    @property
    def is_buy(self) -> bool:
        return self.side is TradeSide.BUY
