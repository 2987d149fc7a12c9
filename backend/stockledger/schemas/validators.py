# backend/stockledger/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

These raise ValueError so Pydantic reports them as 422 responses; the
service layer applies the same rules (and raises domain errors) for
callers that don't go through the API.
"""

from stockledger.services.constants import TICKER_PATTERN, WEIGHT_TOTAL


def validate_ticker(value: str) -> str:
    """
    Validate a ticker symbol: 1-4 uppercase letters, nothing else.

    Lowercase input is rejected rather than normalized.

    Raises:
        ValueError: If ticker format is invalid
    """
    if not value:
        raise ValueError("Ticker cannot be empty")

    if not TICKER_PATTERN.fullmatch(value):
        raise ValueError(
            f"Invalid ticker: '{value}'. Only capitalized letters, 4 letter maximum"
        )
    return value


def validate_portfolio_name(value: str) -> str:
    """Trim a portfolio name and reject blank ones."""
    if value is None or not value.strip():
        raise ValueError("Portfolio name cannot be blank")
    return value.strip()


def validate_weights(weights: list[int]) -> list[int]:
    """
    Weights are whole, non-negative percentages.

    The sum and the count are checked against the ledger by the service.
    """
    for weight in weights:
        if weight < 0 or weight > WEIGHT_TOTAL:
            raise ValueError(f"Each weight must be between 0 and {WEIGHT_TOTAL}, got {weight}")
    return weights

