# backend/stockledger/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. The PortfolioStore in particular holds every active ledger,
so there must be exactly one per process.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from stockledger.dependencies import get_portfolio_store

    @router.get("/{name}")
    def get_portfolio(name: str, store: PortfolioStore = Depends(get_portfolio_store)):
        ...
"""

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from stockledger.config import settings
from stockledger.database import get_db
from stockledger.services.charting import PerformanceChartService
from stockledger.services.ledger import LedgerRepository, PortfolioStore
from stockledger.services.market_data import (
    CsvCachePriceProvider,
    PriceProvider,
    YahooFinancePriceProvider,
)
from stockledger.services.valuation import StockAnalysisService

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_price_provider (no deps)
# 2. get_portfolio_store (depends on provider)
# 3. get_stock_analysis_service (depends on provider)
# 4. get_chart_service (depends on provider)


@lru_cache(maxsize=1)
def get_price_provider() -> PriceProvider:
    """
    Get the singleton price provider.

    Always a CSV cache; with PRICE_SOURCE=yahoo, misses are filled from
    Yahoo Finance and written back to the cache directory.
    """
    upstream = None
    if settings.price_source == "yahoo":
        upstream = YahooFinancePriceProvider(timeout=settings.provider_timeout_seconds)

    provider = CsvCachePriceProvider(settings.price_cache_dir, upstream=upstream)
    logger.info(f"Price provider: {provider.name} ({settings.price_cache_dir})")
    return provider


@lru_cache(maxsize=1)
def get_portfolio_store() -> PortfolioStore:
    """Get the singleton store of active portfolios."""
    return PortfolioStore(
        get_price_provider(),
        require_whole_share_buys=settings.require_whole_share_buys,
    )


@lru_cache(maxsize=1)
def get_stock_analysis_service() -> StockAnalysisService:
    return StockAnalysisService(get_price_provider())


@lru_cache(maxsize=1)
def get_chart_service() -> PerformanceChartService:
    return PerformanceChartService(get_price_provider(), max_symbols=settings.chart_max_symbols)


# =============================================================================
# PER-REQUEST DEPENDENCIES
# =============================================================================

def get_ledger_repository(db: Session = Depends(get_db)) -> LedgerRepository:
    """Snapshot repository bound to the request's database session."""
    return LedgerRepository(db)
