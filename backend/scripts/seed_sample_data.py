#!/usr/bin/env python3
# backend/scripts/seed_sample_data.py
"""
Seed a sample portfolio and save it to the database.

Buys a few holdings in May 2023, rebalances them on the given date and
saves the result under the handle "sample-portfolio". Prices come from
the configured PRICE_SOURCE, so the CSV cache must hold the tickers
(or PRICE_SOURCE=yahoo must be able to fetch them).

Usage:
    python backend/scripts/seed_sample_data.py
    python backend/scripts/seed_sample_data.py 2024-03-01
"""
import sys
from datetime import date
from pathlib import Path

# Add the backend directory to Python path so 'stockledger' is importable
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from stockledger.database import SessionLocal, init_db
from stockledger.dependencies import get_portfolio_store
from stockledger.services.exceptions import ServiceError
from stockledger.services.ledger import LedgerRepository
from stockledger.utils import setup_logging, get_logger
from stockledger.utils.date_utils import parse_iso_date

logger = get_logger(__name__)

SAMPLE_NAME = "Sample Portfolio"
SAMPLE_HANDLE = "sample-portfolio"
SAMPLE_TRADES = [
    ("AAPL", 10, date(2023, 5, 1)),
    ("MSFT", 5, date(2023, 5, 1)),
    ("AAL", 20, date(2023, 5, 3)),
]
SAMPLE_WEIGHTS = [40, 40, 20]
DEFAULT_REBALANCE_DATE = date(2024, 3, 1)


def seed(rebalance_on: date) -> str:
    """Build the sample portfolio and save it. Returns the saved handle."""
    init_db()
    store = get_portfolio_store()

    store.create(SAMPLE_NAME)
    for ticker, shares, on in SAMPLE_TRADES:
        store.buy(SAMPLE_NAME, ticker, shares, on)
        logger.info(f"Bought {shares} {ticker} on {on}")

    for trade in store.rebalance(SAMPLE_NAME, SAMPLE_WEIGHTS, rebalance_on):
        logger.info(f"Rebalance {trade.side.value} {trade.shares} {trade.ticker}")

    total = store.total_value(SAMPLE_NAME, rebalance_on)
    logger.info(f"Value on {rebalance_on}: {total}")

    db = SessionLocal()
    try:
        return store.save(SAMPLE_NAME, LedgerRepository(db), SAMPLE_HANDLE)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    try:
        rebalance_on = parse_iso_date(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_REBALANCE_DATE
    except ValueError as e:
        logger.error(str(e))
        sys.exit(2)

    try:
        handle = seed(rebalance_on)
    except ServiceError as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
    print(f"Saved '{SAMPLE_NAME}' as '{handle}'")
