# backend/stockledger/middleware/__init__.py
"""
Middleware components for Stock Ledger.

Usage:
    from stockledger.middleware import CorrelationIdMiddleware

    app.add_middleware(CorrelationIdMiddleware)
"""

from stockledger.middleware.correlation import CorrelationIdMiddleware

__all__ = ["CorrelationIdMiddleware"]
