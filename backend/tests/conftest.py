# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- An in-memory PriceProvider with deterministic series
- A PortfolioStore with a pinned "today"
- A TestClient with every service dependency overridden
"""

import os

# Set BEFORE importing stockledger so Settings() resolves test defaults
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PRICE_SOURCE", "cache")

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stockledger.database import get_db
from stockledger.dependencies import (
    get_chart_service,
    get_portfolio_store,
    get_stock_analysis_service,
)
from stockledger.main import app
from stockledger.models import Base
from stockledger.services.charting import PerformanceChartService
from stockledger.services.exceptions import TickerNotFoundError
from stockledger.services.ledger import PortfolioStore
from stockledger.services.market_data.base import PriceProvider, PriceRecord
from stockledger.services.valuation import StockAnalysisService

# "Today" for every store built by these fixtures
TODAY = date(2024, 6, 28)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# PRICE DATA
# =============================================================================

def make_record(d: date, close: Decimal | str | int, volume: int = 1000) -> PriceRecord:
    """Build a PriceRecord whose open/high/low all equal the close."""
    close = Decimal(str(close))
    return PriceRecord(date=d, open=close, high=close, low=close, close=close, volume=volume)


def weekday_series(
        start: date,
        end: date,
        first_close: Decimal | str,
        daily_change: Decimal | str = "0",
) -> list[PriceRecord]:
    """
    One record per Monday-Friday between start and end.

    The close moves by `daily_change` per trading day, starting at `first_close`.
    """
    first_close = Decimal(str(first_close))
    daily_change = Decimal(str(daily_change))
    records = []
    current = start
    while current <= end:
        if current.weekday() < 5:
            records.append(make_record(current, first_close + daily_change * len(records)))
        current += timedelta(days=1)
    return records


class InMemoryPriceProvider(PriceProvider):
    """
    PriceProvider backed by a dict of series, for testing.

    Records how many times each ticker was loaded so caching can be checked.
    """

    def __init__(self, series: dict[str, list[PriceRecord]] | None = None) -> None:
        super().__init__()
        self._series: dict[str, list[PriceRecord]] = dict(series or {})
        self.load_counts: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "memory"

    def add_series(self, ticker: str, records: list[PriceRecord]) -> None:
        self._series[ticker] = list(records)
        self.clear_cache(ticker)

    def _load_series(self, ticker: str) -> list[PriceRecord]:
        self.load_counts[ticker] = self.load_counts.get(ticker, 0) + 1
        if ticker not in self._series:
            raise TickerNotFoundError(ticker=ticker, provider=self.name)
        return list(self._series[ticker])


# Series used across the suite (2023-01-02 is a Monday)
SERIES_START = date(2023, 1, 2)


def default_series() -> dict[str, list[PriceRecord]]:
    return {
        # 10.00, 10.10, 10.20, ... one step per trading day
        "AAL": weekday_series(SERIES_START, TODAY, "10.00", "0.10"),
        # Flat 200.00
        "MSFT": weekday_series(SERIES_START, TODAY, "200.00"),
        # 100.00, 100.50, ...
        "AAPL": weekday_series(SERIES_START, TODAY, "100.00", "0.50"),
        # Three points only
        "GOOG": [
            make_record(date(2023, 1, 4), 105),
            make_record(date(2023, 1, 5), 110),
            make_record(date(2023, 1, 6), 115),
        ],
    }


@pytest.fixture
def prices() -> InMemoryPriceProvider:
    """Provider with AAL, MSFT, AAPL (weekdays 2023-01-02..2024-06-28) and GOOG."""
    return InMemoryPriceProvider(default_series())


@pytest.fixture
def store(prices) -> PortfolioStore:
    """Store whose clock always says TODAY."""
    return PortfolioStore(prices, clock=lambda: TODAY)


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture(scope="function")
def client(db: Session, store: PortfolioStore, prices: InMemoryPriceProvider) -> Iterator[TestClient]:
    """
    TestClient wired to the test database, store and price provider.

    The singletons from stockledger.dependencies are replaced so that no
    test reads the real price cache or shares ledgers with another test.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_portfolio_store] = lambda: store
    app.dependency_overrides[get_stock_analysis_service] = lambda: StockAnalysisService(prices)
    app.dependency_overrides[get_chart_service] = lambda: PerformanceChartService(prices)

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
