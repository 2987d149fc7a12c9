# backend/stockledger/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)

Run with:
    uvicorn stockledger.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockledger import __version__
from stockledger.config import settings
from stockledger.database import check_database_health, init_db
from stockledger.middleware import CorrelationIdMiddleware
from stockledger.routers import portfolios_router, stocks_router
from stockledger.schemas.errors import ErrorDetail, ValidationErrorDetail
from stockledger.services.exceptions import (
    ServiceError,
    ValidationError,
    ChronologyError,
    NonChronologicalOperationError,
    ConflictError,
    NotFoundError,
    PriceDataError,
    OutOfRangeForXError,
    MarketDataError,
    TickerNotFoundError,
    ProviderUnavailableError,
    RateLimitError,
)
from stockledger.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Portfolio ledgers, valuation and performance charts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Last added = first executed
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Handlers are looked up along the exception's MRO, so one handler per
# family covers every subclass; the most specific registration wins.
# =============================================================================

def _error_response(status_code: int, exc: ServiceError, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details=details,
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle rejected input (400)."""
    logger.warning(f"Validation error: {exc}")
    return _error_response(400, exc, {"field": exc.field} if exc.field else None)


@app.exception_handler(NonChronologicalOperationError)
async def chronology_error_handler(request: Request, exc: NonChronologicalOperationError) -> JSONResponse:
    """Handle operations dated before the portfolio's watermark (409)."""
    logger.warning(f"Chronology error: {exc}")
    return _error_response(409, exc, {
        "portfolio": exc.portfolio,
        "date": exc.date.isoformat(),
        "watermark": exc.watermark.isoformat(),
    })


@app.exception_handler(ChronologyError)
async def generic_chronology_error_handler(request: Request, exc: ChronologyError) -> JSONResponse:
    logger.warning(f"Chronology error: {exc}")
    return _error_response(409, exc)


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Handle duplicate portfolio names (409)."""
    logger.warning(f"Conflict: {exc}")
    return _error_response(409, exc)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing portfolios, holdings and snapshots (404)."""
    logger.warning(f"Not found: {exc}")
    return _error_response(404, exc, {
        "resource_type": exc.resource_type,
        "resource_id": exc.resource_id,
    })


@app.exception_handler(OutOfRangeForXError)
async def out_of_range_for_x_handler(request: Request, exc: OutOfRangeForXError) -> JSONResponse:
    logger.warning(f"Crossover window out of range: {exc}")
    return _error_response(404, exc, {
        "ticker": exc.ticker,
        "start": exc.start.isoformat(),
        "end": exc.end.isoformat(),
        "days": exc.days,
    })


@app.exception_handler(PriceDataError)
async def price_data_error_handler(request: Request, exc: PriceDataError) -> JSONResponse:
    """Handle dates the price history can't answer for (404)."""
    logger.warning(f"Price data error: {exc}")
    return _error_response(404, exc, {
        "ticker": exc.ticker,
        "date": exc.date.isoformat() if exc.date else None,
    })


@app.exception_handler(TickerNotFoundError)
async def ticker_not_found_handler(request: Request, exc: TickerNotFoundError) -> JSONResponse:
    """Handle ticker not found on the price provider (404)."""
    logger.warning(f"Ticker not found on provider: {exc.ticker}")
    return _error_response(404, exc, {"ticker": exc.ticker})


@app.exception_handler(ProviderUnavailableError)
async def provider_unavailable_handler(request: Request, exc: ProviderUnavailableError) -> JSONResponse:
    """Handle price provider unavailable (503)."""
    logger.error(f"Provider unavailable: {exc}")
    return _error_response(503, exc)


@app.exception_handler(RateLimitError)
async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle rate limit exceeded (429)."""
    logger.warning(f"Rate limit exceeded: {exc}")
    return _error_response(429, exc, {"retry_after": exc.retry_after} if exc.retry_after else None)


@app.exception_handler(MarketDataError)
async def market_data_error_handler(request: Request, exc: MarketDataError) -> JSONResponse:
    """Handle other price provider failures (502)."""
    logger.error(f"Market data error: {exc}")
    return _error_response(502, exc)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(500, exc)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert FastAPI's {"detail": "..."} into ErrorDetail."""
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        422: "ValidationError",
        500: "InternalServerError",
    }
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_types.get(exc.status_code, "HTTPError"),
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report Pydantic validation errors as ValidationErrorDetail (422)."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(details=errors).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(portfolios_router)  # /portfolios/*
app.include_router(stocks_router)  # /stocks/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
def root():
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns HTTP 503 if the snapshot database is unreachable.
    """
    database = check_database_health()
    response_data = {
        "status": database["status"],
        "checks": {"database": database},
        "price_source": settings.price_source,
    }
    if database["status"] != "healthy":
        return JSONResponse(status_code=503, content=response_data)
    return response_data
