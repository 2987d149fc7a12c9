# backend/tests/schemas/test_validators.py
"""
Tests for schema validators and request models.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from stockledger.schemas.portfolios import PortfolioCreate, RebalanceRequest, TradeRequest
from stockledger.schemas.validators import validate_portfolio_name, validate_ticker, validate_weights


class TestValidateTicker:
    """Tickers are 1-4 uppercase letters and are never normalized."""

    @pytest.mark.parametrize("ticker", ["A", "GOOG", "AAL"])
    def test_valid(self, ticker):
        assert validate_ticker(ticker) == ticker

    @pytest.mark.parametrize("ticker", ["", "goog", "GOOGL", "BRK.B", "A1", "AAL\n"])
    def test_invalid(self, ticker):
        with pytest.raises(ValueError):
            validate_ticker(ticker)


class TestValidatePortfolioName:
    def test_trims(self):
        assert validate_portfolio_name("  Tech  ") == "Tech"

    def test_blank(self):
        with pytest.raises(ValueError):
            validate_portfolio_name("   ")


class TestValidateWeights:
    def test_valid(self):
        assert validate_weights([0, 100]) == [0, 100]

    @pytest.mark.parametrize("weights", [[-1, 101], [101]])
    def test_out_of_bounds(self, weights):
        with pytest.raises(ValueError):
            validate_weights(weights)


class TestRequestModels:
    """Tests for the request schemas."""

    def test_trade_request(self):
        request = TradeRequest(ticker="AAL", shares="3", date="2023-05-01")

        assert request.shares == Decimal("3")
        assert request.date == date(2023, 5, 1)

    def test_trade_request_rejects_lowercase(self):
        with pytest.raises(ValidationError):
            TradeRequest(ticker="aal", shares=1, date="2023-05-01")

    def test_trade_request_rejects_bad_date(self):
        with pytest.raises(ValidationError):
            TradeRequest(ticker="AAL", shares=1, date="2023-02-30")

    def test_portfolio_create_trims(self):
        assert PortfolioCreate(name=" Retirement ").name == "Retirement"

    def test_rebalance_request(self):
        request = RebalanceRequest(weights=[50, 50], date="2024-03-01")

        assert request.weights == [50, 50]
