# backend/stockledger/schemas/charts.py
"""
Pydantic schemas for performance charts.

The response carries both the rendered text and the numbers behind it so
a frontend can draw its own chart.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class ChartRowResponse(BaseModel):
    label: str = Field(examples=["Jan 2024"])
    date: dt.date
    value: Decimal
    bar: str = Field(examples=["*******"])


class ChartResponse(BaseModel):
    title: str
    granularity: str = Field(examples=["day", "month", "year"])
    step: int
    is_absolute: bool
    base: int = Field(description="Value drawn as a single symbol")
    units_per_symbol: int
    rows: list[ChartRowResponse]
    text: str = Field(description="The chart rendered as plain text")
