# backend/stockledger/__init__.py
"""Stock Ledger: portfolio ledgers, valuation and performance charts."""

__version__ = "1.0.0"
