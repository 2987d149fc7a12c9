# backend/stockledger/schemas/portfolios.py
"""
Pydantic schemas for portfolio (ledger) endpoints.

These schemas define:
- What data clients must send (Create, TradeRequest, RebalanceRequest, ...)
- What data the API returns (Response models)

Validation layers:
- Field constraints: type, range
- Field validators: ticker format, name trimming
- Service layer: chronology, trading days, holdings, weight totals
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from stockledger.schemas.validators import (
    validate_portfolio_name,
    validate_ticker,
    validate_weights,
)


# =============================================================================
# REQUESTS
# =============================================================================

class PortfolioCreate(BaseModel):
    """Schema for creating a new, empty portfolio."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Retirement", "Tech Stocks"],
        description="Unique name of the portfolio"
    )

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize name: trim whitespace."""
        return validate_portfolio_name(v)


class TradeRequest(BaseModel):
    """Schema for buying or selling shares of one ticker."""

    ticker: str = Field(
        ...,
        examples=["AAL", "GOOG"],
        description="1-4 uppercase letters"
    )
    shares: Decimal = Field(
        ...,
        gt=0,
        examples=[3],
        description="Number of shares (whole shares for buys by default)"
    )
    date: dt.date = Field(
        ...,
        examples=["2023-05-01"],
        description="Trading day of the operation (yyyy-MM-dd)"
    )

    @field_validator("ticker")
    @classmethod
    def validate_ticker_format(cls, v: str) -> str:
        return validate_ticker(v)


class RebalanceRequest(BaseModel):
    """Schema for rebalancing to integer percentage weights."""

    weights: list[int] = Field(
        ...,
        examples=[[50, 50]],
        description="One percentage per holding, in holding order, summing to 100"
    )
    date: dt.date = Field(..., examples=["2024-03-01"])

    @field_validator("weights")
    @classmethod
    def validate_weight_values(cls, v: list[int]) -> list[int]:
        return validate_weights(v)


class SaveRequest(BaseModel):
    """Schema for saving (and closing) a portfolio."""

    handle: str | None = Field(
        default=None,
        max_length=100,
        description="Name to save under; defaults to the portfolio name"
    )


class LoadRequest(BaseModel):
    """Schema for loading a saved portfolio."""

    handle: str = Field(..., min_length=1, max_length=100)


# =============================================================================
# RESPONSES
# =============================================================================

class HoldingResponse(BaseModel):
    ticker: str
    shares: Decimal
    date_added: dt.date


class PortfolioResponse(BaseModel):
    """A portfolio's holdings (in insertion order) and watermark."""

    name: str
    watermark: dt.date | None = Field(
        default=None,
        description="Most recent date any operation was performed at"
    )
    holdings: list[HoldingResponse] = Field(default_factory=list)


class PortfolioListResponse(BaseModel):
    names: list[str]


class ValueResponse(BaseModel):
    name: str
    date: dt.date
    total_value: Decimal


class CompositionResponse(BaseModel):
    name: str
    date: dt.date
    shares: dict[str, Decimal] = Field(description="Shares per ticker")


class DistributionResponse(BaseModel):
    name: str
    date: dt.date
    values: dict[str, Decimal] = Field(description="Value per ticker (non-zero only)")


class RebalanceTradeResponse(BaseModel):
    ticker: str
    side: str = Field(examples=["buy", "sell"])
    shares: Decimal
    target_value: Decimal
    actual_value: Decimal


class RebalanceResponse(BaseModel):
    trades: list[RebalanceTradeResponse]
    portfolio: PortfolioResponse


class SaveResponse(BaseModel):
    name: str
    handle: str


class SavedHandlesResponse(BaseModel):
    handles: list[str]
