# backend/stockledger/services/__init__.py
"""
Service layer for business logic.

Services have NO knowledge of HTTP: they raise the domain exceptions in
exceptions.py and the routers translate them into responses.

Architecture:
    services/
    ├── __init__.py          # This file
    ├── exceptions.py        # Domain exceptions
    ├── constants.py         # Business constants
    ├── market_data/         # Price providers (CSV cache, Yahoo)
    ├── ledger/              # Ledger, PortfolioStore, snapshot repository
    ├── valuation/           # Calculators, rebalancing, stock analysis
    └── charting/            # Granularity, sampling, text rendering
"""
