# backend/stockledger/routers/mappers.py
"""
Mapper functions (internal types -> Pydantic schemas) shared by the routers.
"""

from stockledger.schemas.charts import ChartResponse, ChartRowResponse
from stockledger.schemas.portfolios import (
    HoldingResponse,
    PortfolioResponse,
    RebalanceTradeResponse,
)
from stockledger.services.charting import ChartResult
from stockledger.services.ledger import Ledger
from stockledger.services.valuation import RebalanceTrade


def map_portfolio(ledger: Ledger) -> PortfolioResponse:
    """Map a Ledger to its API representation."""
    return PortfolioResponse(
        name=ledger.name,
        watermark=ledger.watermark,
        holdings=[
            HoldingResponse(ticker=h.ticker, shares=h.shares, date_added=h.date_added)
            for h in ledger.holdings
        ],
    )


def map_trade(trade: RebalanceTrade) -> RebalanceTradeResponse:
    return RebalanceTradeResponse(
        ticker=trade.ticker,
        side=trade.side.value,
        shares=trade.shares,
        target_value=trade.target_value,
        actual_value=trade.actual_value,
    )


def map_chart(chart: ChartResult) -> ChartResponse:
    """Map a ChartResult, including its rendered text."""
    return ChartResponse(
        title=chart.title,
        granularity=chart.granularity.unit.value,
        step=chart.granularity.step,
        is_absolute=chart.is_absolute,
        base=chart.scale.base,
        units_per_symbol=chart.scale.units_per_symbol,
        rows=[
            ChartRowResponse(label=row.label, date=row.date, value=row.value, bar=row.bar)
            for row in chart.rows
        ],
        text=chart.render(),
    )
