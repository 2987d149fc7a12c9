# backend/stockledger/services/valuation/rebalance.py
"""
Target-weight rebalancing.

The plan is computed entirely from the ledger as it stands before any
trade: the total value, every target and every actual value come from the
same pre-rebalance state. The trades are then applied in holding order,
each through Ledger.update_holding, on a working copy; the ledger only
adopts the result when every trade went through.

Example:
    calc = RebalanceCalculator()
    trades = calc.rebalance(ledger, [50, 50], date(2024, 3, 1), prices)
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from stockledger.services.constants import WEIGHT_TOTAL
from stockledger.services.exceptions import (
    WeightCountMismatchError,
    WeightSumInvalidError,
)
from stockledger.services.market_data.base import PriceProvider
from stockledger.services.valuation.calculators import holding_value
from stockledger.services.valuation.types import RebalanceTrade, TradeSide

if TYPE_CHECKING:
    from stockledger.services.ledger.ledger import Ledger

logger = logging.getLogger(__name__)


class RebalanceCalculator:
    """Computes and applies the trades that bring holdings to target weights."""

    @staticmethod
    def validate_weights(weights: list[int], holding_count: int) -> None:
        """
        Check weights against the holdings before anything is touched.

        Raises:
            WeightCountMismatchError: One weight per holding is required
            WeightSumInvalidError: Weights must add up to 100
        """
        if len(weights) != holding_count or holding_count == 0:
            raise WeightCountMismatchError(len(weights), holding_count)

        total = sum(weights)
        if total != WEIGHT_TOTAL:
            raise WeightSumInvalidError(total)

    def plan(
            self,
            ledger: Ledger,
            weights: list[int],
            on: date,
            prices: PriceProvider,
            today: date | None = None,
    ) -> list[RebalanceTrade]:
        """
        Work out the trades for `weights` (aligned with ledger.holdings).

        Computing the total value advances the ledger's watermark to `on`.
        """
        self.validate_weights(weights, len(ledger.holdings))

        total = ledger.total_value(on, prices, today)

        trades = []
        for holding, weight in zip(ledger.holdings, weights):
            target = total * Decimal(weight) / WEIGHT_TOTAL
            actual = holding_value(holding, on, prices)
            if actual == target:
                continue

            price_per_share = actual / holding.shares
            delta = abs(actual - target) / price_per_share

            if actual > target:
                # Selling can't exceed the position, whatever the rounding
                trades.append(RebalanceTrade(
                    holding.ticker, TradeSide.SELL, min(delta, holding.shares), target, actual,
                ))
            else:
                trades.append(RebalanceTrade(holding.ticker, TradeSide.BUY, delta, target, actual))

        return trades

    def apply(
            self,
            ledger: Ledger,
            trades: list[RebalanceTrade],
            on: date,
            prices: PriceProvider,
    ) -> None:
        """Apply trades in order; on any failure the ledger is left untouched."""
        working = ledger.copy()
        for trade in trades:
            working.update_holding(trade.ticker, trade.shares, on, trade.is_buy, prices)
        ledger.restore(working.snapshot())

    def rebalance(
            self,
            ledger: Ledger,
            weights: list[int],
            on: date,
            prices: PriceProvider,
            today: date | None = None,
    ) -> list[RebalanceTrade]:
        """Plan and apply a rebalance, returning the executed trades."""
        trades = self.plan(ledger, weights, on, prices, today)
        self.apply(ledger, trades, on, prices)

        logger.info(
            f"Rebalanced '{ledger.name}' on {on} to {weights}: {len(trades)} trades",
            extra={"portfolio": ledger.name, "trades": len(trades)},
        )
        return trades
