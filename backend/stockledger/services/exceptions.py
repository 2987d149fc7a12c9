# backend/stockledger/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The router layer is responsible for mapping these to appropriate HTTP responses.

Every failure is raised synchronously before the ledger is mutated, so a
caught exception always means "nothing changed".

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidNameError
    │   ├── InvalidTickerError
    │   ├── InvalidSharesError
    │   ├── FractionalBuyError
    │   ├── InsufficientSharesError
    │   ├── FutureDateError
    │   ├── InvalidRangeError
    │   ├── WeightCountMismatchError
    │   └── WeightSumInvalidError
    ├── ChronologyError
    │   └── NonChronologicalOperationError
    ├── ConflictError
    │   └── DuplicateNameError
    ├── NotFoundError
    │   ├── PortfolioNotFoundError
    │   ├── UnknownTickerError
    │   └── SnapshotNotFoundError
    ├── PriceDataError
    │   ├── PriceNotFoundError
    │   ├── UnknownTradingDateError
    │   ├── NoDataInRangeError
    │   └── OutOfRangeError
    │       └── OutOfRangeForXError
    └── MarketDataError
        ├── TickerNotFoundError
        ├── ProviderUnavailableError
        └── RateLimitError
"""

from datetime import date
from decimal import Decimal


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when an operation's input is rejected.

    Attributes:
        field: The argument that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidNameError(ValidationError):
    """Raised when a portfolio name is empty or blank."""

    def __init__(self, name: str | None) -> None:
        self.name = name
        super().__init__("Portfolio name was not provided.", field="name")


class InvalidTickerError(ValidationError):
    """Raised when a ticker is not 1-4 uppercase letters."""

    def __init__(self, ticker: str | None) -> None:
        self.ticker = ticker
        super().__init__(
            f"Invalid ticker: {ticker}. Only capitalized letters, 4 letter maximum",
            field="ticker",
        )


class InvalidSharesError(ValidationError):
    """Raised when a share count is zero or negative."""

    def __init__(self, shares: Decimal) -> None:
        self.shares = shares
        super().__init__(f"Share count must be positive, got {shares}", field="shares")


class FractionalBuyError(ValidationError):
    """Raised when whole-share buying is required and a fraction was given."""

    def __init__(self, shares: Decimal) -> None:
        self.shares = shares
        super().__init__(
            f"Cannot buy fractional shares ({shares}). Please enter a whole number of shares.",
            field="shares",
        )


class InsufficientSharesError(ValidationError):
    """Raised when selling more shares than are held."""

    def __init__(self, ticker: str, requested: Decimal, held: Decimal) -> None:
        self.ticker = ticker
        self.requested = requested
        self.held = held
        super().__init__(
            f"Cannot sell more shares of {ticker} ({requested}) than existing ({held})",
            field="shares",
        )


class FutureDateError(ValidationError):
    """Raised when a valuation date lies after today."""

    def __init__(self, requested: date, today: date) -> None:
        self.date = requested
        self.today = today
        super().__init__(f"Date cannot be in the future: {requested} is after {today}", field="date")


class InvalidRangeError(ValidationError):
    """Raised when a date range starts after it ends."""

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Start date {start} cannot be after end date {end}", field="start")


class WeightCountMismatchError(ValidationError):
    """Raised when rebalance weights don't line up with the holdings."""

    def __init__(self, weight_count: int, holding_count: int) -> None:
        self.weight_count = weight_count
        self.holding_count = holding_count
        super().__init__(
            f"Expected {holding_count} weights (one per holding), got {weight_count}",
            field="weights",
        )


class WeightSumInvalidError(ValidationError):
    """Raised when rebalance weights don't add up to 100."""

    def __init__(self, total: int) -> None:
        self.total = total
        super().__init__(f"Percentages must add up to 100 to rebalance, got {total}", field="weights")


# =============================================================================
# CHRONOLOGY / CONFLICT ERRORS
# =============================================================================


class ChronologyError(ServiceError):
    """Base exception for operations that would move a ledger back in time."""
    pass


class NonChronologicalOperationError(ChronologyError):
    """
    Raised when an operation's date precedes the ledger's watermark.

    Attributes:
        portfolio: Name of the ledger
        date: The rejected date
        watermark: The ledger's most recent operation date
    """

    def __init__(self, portfolio: str, requested: date, watermark: date) -> None:
        self.portfolio = portfolio
        self.date = requested
        self.watermark = watermark
        super().__init__(
            f"Portfolio operations must be performed chronologically. "
            f"The date {requested} is before the more recent date {watermark} "
            f"previously entered for '{portfolio}'."
        )


class ConflictError(ServiceError):
    """Base exception for state conflicts."""
    pass


class DuplicateNameError(ConflictError):
    """Raised when a portfolio with the same name is already active."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Portfolio '{name}' already exists.")


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Portfolio", "Holding")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class PortfolioNotFoundError(NotFoundError):
    """Raised when no active portfolio has the given name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Portfolio '{name}' not found", resource_type="Portfolio", resource_id=name)


class UnknownTickerError(NotFoundError):
    """Raised when selling a ticker the portfolio doesn't hold."""

    def __init__(self, ticker: str, portfolio: str) -> None:
        self.ticker = ticker
        self.portfolio = portfolio
        super().__init__(
            f"Cannot sell a stock ({ticker}) that doesn't exist in this portfolio '{portfolio}'",
            resource_type="Holding",
            resource_id=ticker,
        )


class SnapshotNotFoundError(NotFoundError):
    """Raised when no saved snapshot exists under a handle."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"No saved portfolio under '{handle}'", resource_type="Snapshot", resource_id=handle)


# =============================================================================
# PRICE DATA ERRORS
# =============================================================================


class PriceDataError(ServiceError):
    """
    Base exception for missing price data in a ticker's series.

    Attributes:
        ticker: The ticker being looked up
        date: The date that could not be resolved (optional)
    """

    def __init__(self, message: str, ticker: str, on: date | None = None) -> None:
        self.ticker = ticker
        self.date = on
        super().__init__(message)


class PriceNotFoundError(PriceDataError):
    """Raised when a ticker has no closing price on a date."""

    def __init__(self, ticker: str, on: date) -> None:
        super().__init__(f"Cannot find stock {ticker} with this date: {on}", ticker=ticker, on=on)


class UnknownTradingDateError(PriceDataError):
    """Raised when a trade is dated on a day the ticker didn't trade."""

    def __init__(self, ticker: str, on: date) -> None:
        super().__init__(f"{on} does not exist in this stock {ticker}", ticker=ticker, on=on)


class NoDataInRangeError(PriceDataError):
    """Raised when walking for the nearest trading day leaves the series."""

    def __init__(self, ticker: str, on: date) -> None:
        super().__init__(f"Stock info not found for {ticker} near {on}", ticker=ticker, on=on)


class OutOfRangeError(PriceDataError):
    """Raised when a calculation needs data before/after the known series."""

    def __init__(self, ticker: str, on: date, message: str | None = None) -> None:
        super().__init__(message or f"Date was not found: {on}.", ticker=ticker, on=on)


class OutOfRangeForXError(OutOfRangeError):
    """Raised when a crossover window isn't covered by the series."""

    def __init__(self, ticker: str, start: date, end: date, days: int) -> None:
        self.start = start
        self.end = end
        self.days = days
        super().__init__(
            ticker,
            start,
            message=(
                f"Start date or end date was not in range for {ticker}: "
                f"{start} - {days} days to {end}"
            ),
        )


# =============================================================================
# MARKET DATA PROVIDER ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for market data provider failures.

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class TickerNotFoundError(MarketDataError):
    """
    Raised when a provider has no price history for a ticker.

    This is NOT a retryable error.
    """

    def __init__(self, ticker: str, provider: str) -> None:
        self.ticker = ticker
        super().__init__(f"No price data found for {ticker} ({provider})", provider=provider)


class ProviderUnavailableError(MarketDataError):
    """
    Raised when a price provider is temporarily unavailable.

    Examples: network timeout, server errors. This is a retryable error.
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Provider '{provider}' is unavailable: {reason}", provider=provider)


class RateLimitError(MarketDataError):
    """
    Raised when the provider's rate limit has been exceeded.

    This is a retryable error (with backoff).
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f" (retry after {retry_after}s)"
        self.retry_after = retry_after
        super().__init__(message, provider=provider)


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidNameError",
    "InvalidTickerError",
    "InvalidSharesError",
    "FractionalBuyError",
    "InsufficientSharesError",
    "FutureDateError",
    "InvalidRangeError",
    "WeightCountMismatchError",
    "WeightSumInvalidError",
    # Chronology / Conflict
    "ChronologyError",
    "NonChronologicalOperationError",
    "ConflictError",
    "DuplicateNameError",
    # Not Found
    "NotFoundError",
    "PortfolioNotFoundError",
    "UnknownTickerError",
    "SnapshotNotFoundError",
    # Price Data
    "PriceDataError",
    "PriceNotFoundError",
    "UnknownTradingDateError",
    "NoDataInRangeError",
    "OutOfRangeError",
    "OutOfRangeForXError",
    # Market Data
    "MarketDataError",
    "TickerNotFoundError",
    "ProviderUnavailableError",
    "RateLimitError",
]
