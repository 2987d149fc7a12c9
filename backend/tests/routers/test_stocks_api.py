# backend/tests/routers/test_stocks_api.py
"""
Integration tests for the /stocks endpoints.

GOOG closes: 2023-01-04 = 105, 2023-01-05 = 110, 2023-01-06 = 115.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient


class TestGainLoss:
    """Tests for GET /stocks/{ticker}/gain-loss."""

    def test_gain(self, client: TestClient):
        response = client.get("/stocks/GOOG/gain-loss", params={"start": "2023-01-04", "end": "2023-01-06"})

        assert response.status_code == 200
        data = response.json()
        assert data["ticker"] == "GOOG"
        assert Decimal(data["gain_loss"]) == 10

    def test_lowercase_ticker(self, client: TestClient):
        response = client.get("/stocks/goog/gain-loss", params={"start": "2023-01-04", "end": "2023-01-06"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidTickerError"

    def test_inverted_range(self, client: TestClient):
        response = client.get("/stocks/GOOG/gain-loss", params={"start": "2023-01-06", "end": "2023-01-04"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidRangeError"

    def test_unknown_ticker(self, client: TestClient):
        response = client.get("/stocks/ZZZZ/gain-loss", params={"start": "2023-01-04", "end": "2023-01-06"})

        assert response.status_code == 404
        assert response.json()["details"] == {"ticker": "ZZZZ"}

    def test_malformed_date(self, client: TestClient):
        response = client.get("/stocks/GOOG/gain-loss", params={"start": "01/04/2023", "end": "2023-01-06"})

        assert response.status_code == 422


class TestMovingAverage:
    """Tests for GET /stocks/{ticker}/moving-average."""

    @pytest.mark.parametrize("days,expected", [(1, "110"), (2, "107.5")])
    def test_average(self, client: TestClient, days, expected):
        response = client.get("/stocks/GOOG/moving-average", params={"date": "2023-01-05", "days": days})

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["moving_average"]) == Decimal(expected)
        assert data["date"] == "2023-01-05"
        assert data["days"] == days

    def test_out_of_range(self, client: TestClient):
        response = client.get("/stocks/GOOG/moving-average", params={"date": "2023-01-05", "days": 3})

        assert response.status_code == 404
        assert response.json()["error"] == "OutOfRangeError"

    def test_days_must_be_positive(self, client: TestClient):
        response = client.get("/stocks/GOOG/moving-average", params={"date": "2023-01-05", "days": 0})

        assert response.status_code == 422


class TestCrossovers:
    """Tests for GET /stocks/{ticker}/crossovers."""

    def test_rising_series(self, client: TestClient):
        response = client.get(
            "/stocks/AAL/crossovers",
            params={"start": "2023-03-06", "end": "2023-03-08", "days": 5},
        )

        assert response.status_code == 200
        assert response.json()["dates"] == ["2023-03-06", "2023-03-07", "2023-03-08"]

    def test_window_out_of_range(self, client: TestClient):
        response = client.get(
            "/stocks/AAL/crossovers",
            params={"start": "2023-01-03", "end": "2023-02-01", "days": 5},
        )

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "OutOfRangeForXError"
        assert data["details"] == {"ticker": "AAL", "start": "2023-01-03", "end": "2023-02-01", "days": 5}


class TestStockChart:
    """Tests for GET /stocks/{ticker}/chart."""

    def test_chart(self, client: TestClient):
        response = client.get("/stocks/GOOG/chart", params={"start": "2023-01-04", "end": "2023-01-06"})

        assert response.status_code == 200
        data = response.json()
        assert data["granularity"] == "day"
        assert data["step"] == 1
        assert data["units_per_symbol"] == 2
        assert [row["label"] for row in data["rows"]] == ["Jan 4, 2023", "Jan 5, 2023", "Jan 6, 2023"]
        assert data["text"].split("\n")[-1] == "Scale: * = 2"

    def test_no_data_in_range(self, client: TestClient):
        response = client.get("/stocks/GOOG/chart", params={"start": "2024-01-01", "end": "2024-02-01"})

        assert response.status_code == 404
        assert response.json()["error"] == "NoDataInRangeError"
