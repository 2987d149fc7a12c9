# backend/stockledger/schemas/__init__.py
"""
Pydantic schemas for request/response validation.

- errors: ErrorDetail, ValidationErrorDetail
- validators: ticker/name/weight rules shared by the schemas
- portfolios: ledger requests and responses
- stocks: single-ticker analysis responses
- charts: performance chart response
"""
