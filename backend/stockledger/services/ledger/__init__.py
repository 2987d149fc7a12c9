# backend/stockledger/services/ledger/__init__.py
"""
Ledger package: holdings, chronology and the store of active ledgers.

Usage:
    from stockledger.services.ledger import PortfolioStore, Ledger, Holding

Architecture:
    ledger/
    ├── types.py        # Holding, LedgerSnapshot
    ├── ledger.py       # Ledger (holdings + watermark)
    ├── store.py        # PortfolioStore (active ledgers by name)
    └── repository.py   # LedgerRepository (SQLAlchemy snapshots)
"""

from stockledger.services.ledger.types import Holding, LedgerSnapshot
from stockledger.services.ledger.ledger import Ledger
from stockledger.services.ledger.repository import LedgerRepository
from stockledger.services.ledger.store import PortfolioStore

__all__ = [
    "Holding",
    "LedgerSnapshot",
    "Ledger",
    "LedgerRepository",
    "PortfolioStore",
]
