# backend/stockledger/routers/stocks.py
"""
Single-ticker analysis endpoints.

- GET /stocks/{ticker}/gain-loss?start=&end=
- GET /stocks/{ticker}/moving-average?date=&days=
- GET /stocks/{ticker}/crossovers?start=&end=&days=
- GET /stocks/{ticker}/chart?start=&end=&absolute=

All dates must be trading days of the ticker except for the chart, which
snaps to the trading calendar itself.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from stockledger.dependencies import get_chart_service, get_stock_analysis_service
from stockledger.routers.mappers import map_chart
from stockledger.schemas.charts import ChartResponse
from stockledger.schemas.stocks import (
    CrossoverResponse,
    GainLossResponse,
    MovingAverageResponse,
)
from stockledger.services.charting import PerformanceChartService
from stockledger.services.valuation import StockAnalysisService

router = APIRouter(
    prefix="/stocks",
    tags=["Stocks"],
)


@router.get("/{ticker}/gain-loss", response_model=GainLossResponse, summary="Gain or loss per share")
def get_gain_loss(
        ticker: str,
        start: date = Query(...),
        end: date = Query(...),
        service: StockAnalysisService = Depends(get_stock_analysis_service),
) -> GainLossResponse:
    """close(end) - close(start). Both dates must be trading days."""
    return GainLossResponse(
        ticker=ticker,
        start=start,
        end=end,
        gain_loss=service.gain_loss(ticker, start, end),
    )


@router.get("/{ticker}/moving-average", response_model=MovingAverageResponse, summary="Moving average")
def get_moving_average(
        ticker: str,
        on: date = Query(..., alias="date"),
        days: int = Query(..., ge=1, description="Number of trading days averaged"),
        service: StockAnalysisService = Depends(get_stock_analysis_service),
) -> MovingAverageResponse:
    """Average close of the `days` trading days ending on `date`."""
    return MovingAverageResponse(
        ticker=ticker,
        date=on,
        days=days,
        moving_average=service.moving_average(ticker, on, days),
    )


@router.get("/{ticker}/crossovers", response_model=CrossoverResponse, summary="Moving average crossovers")
def get_crossovers(
        ticker: str,
        start: date = Query(...),
        end: date = Query(...),
        days: int = Query(..., ge=1),
        service: StockAnalysisService = Depends(get_stock_analysis_service),
) -> CrossoverResponse:
    """
    Trading days in [start, end] whose close is above their `days`-day
    moving average. Raises **404** if the history doesn't cover
    start - days through end.
    """
    return CrossoverResponse(
        ticker=ticker,
        start=start,
        end=end,
        days=days,
        dates=service.crossovers(ticker, start, end, days),
    )


@router.get("/{ticker}/chart", response_model=ChartResponse, summary="Stock performance chart")
def get_stock_chart(
        ticker: str,
        start: date = Query(...),
        end: date = Query(...),
        absolute: bool = Query(default=True),
        charts: PerformanceChartService = Depends(get_chart_service),
) -> ChartResponse:
    return map_chart(charts.stock_chart(ticker, start, end, absolute))
