# backend/stockledger/schemas/stocks.py
"""
Pydantic schemas for single-ticker analysis endpoints.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class GainLossResponse(BaseModel):
    ticker: str
    start: dt.date
    end: dt.date
    gain_loss: Decimal = Field(description="close(end) - close(start), per share")


class MovingAverageResponse(BaseModel):
    ticker: str
    date: dt.date
    days: int
    moving_average: Decimal


class CrossoverResponse(BaseModel):
    ticker: str
    start: dt.date
    end: dt.date
    days: int
    dates: list[str] = Field(
        description="Trading days whose close beats the moving average (yyyy-MM-dd, oldest first)",
        examples=[["2024-01-03", "2024-01-04"]],
    )
