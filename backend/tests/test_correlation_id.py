# backend/tests/test_correlation_id.py
"""
Tests for correlation ID middleware, context management and the global
endpoints.
"""

import logging

from fastapi.testclient import TestClient

from stockledger.utils.context import clear_correlation_id, get_correlation_id, set_correlation_id
from stockledger.utils.logging import NO_CORRELATION_ID, CorrelationIdFilter


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_filter_uses_placeholder_outside_requests(self):
        clear_correlation_id()
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_correlation_id(self, client: TestClient):
        response = client.get("/")

        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_uses_provided_correlation_id(self, client: TestClient):
        response = client.get("/", headers={"X-Correlation-ID": "my-custom-id-123"})

        assert response.headers["X-Correlation-ID"] == "my-custom-id-123"

    def test_falls_back_to_request_id(self, client: TestClient):
        response = client.get("/", headers={"X-Request-ID": "request-456"})

        assert response.headers["X-Correlation-ID"] == "request-456"

    def test_error_responses_carry_correlation_id(self, client: TestClient):
        response = client.get("/portfolios/Missing", headers={"X-Correlation-ID": "trace-me"})

        assert response.status_code == 404
        assert response.headers["X-Correlation-ID"] == "trace-me"


class TestGlobalEndpoints:
    """Tests for / and /health."""

    def test_root(self, client: TestClient):
        assert client.get("/").json()["docs"] == "/docs"

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["database"] == "sqlite"
