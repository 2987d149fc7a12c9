# backend/tests/services/test_portfolio_store.py
"""
Tests for PortfolioStore: the registry of active ledgers.

Test Categories:
1. Registry - create, get, duplicate and blank names
2. Trading - whole-share policy, clock-driven "today"
3. Persistence - save closes the ledger, load restores or conflicts
"""

import threading
from datetime import date
from decimal import Decimal

import pytest

from stockledger.services.exceptions import (
    DuplicateNameError,
    FractionalBuyError,
    FutureDateError,
    InvalidNameError,
    NonChronologicalOperationError,
    PortfolioNotFoundError,
    SnapshotNotFoundError,
    WeightSumInvalidError,
)
from stockledger.services.ledger import LedgerRepository, PortfolioStore
from tests.conftest import TODAY, InMemoryPriceProvider, default_series

MAY_1 = date(2023, 5, 1)
MAY_3 = date(2023, 5, 3)
MAY_5 = date(2023, 5, 5)
MAY_8 = date(2023, 5, 8)


# =============================================================================
# REGISTRY
# =============================================================================

class TestRegistry:
    """Tests for creating and looking up ledgers."""

    def test_create_and_get(self, store):
        created = store.create("Retirement")

        assert store.get("Retirement") is created
        assert "Retirement" in store
        assert len(store) == 1

    def test_names_in_creation_order(self, store):
        store.create("B")
        store.create("A")

        assert store.names() == ["B", "A"]

    def test_duplicate_name_rejected(self, store):
        store.create("Retirement")

        with pytest.raises(DuplicateNameError):
            store.create("Retirement")

    @pytest.mark.parametrize("name", ["", "  "])
    def test_blank_name_rejected(self, store, name):
        with pytest.raises(InvalidNameError):
            store.create(name)

        assert len(store) == 0

    def test_unknown_portfolio(self, store):
        with pytest.raises(PortfolioNotFoundError) as exc_info:
            store.get("Missing")

        assert exc_info.value.resource_id == "Missing"

    def test_operations_on_unknown_portfolio(self, store):
        with pytest.raises(PortfolioNotFoundError):
            store.buy("Missing", "AAL", 1, MAY_1)


# =============================================================================
# TRADING
# =============================================================================

class TestTrading:
    """Tests for buy/sell through the store."""

    def test_buy_and_sell(self, store):
        store.create("T")

        store.buy("T", "AAL", 3, MAY_1)
        store.sell("T", "AAL", 1, MAY_3)

        assert store.composition("T", MAY_3) == {"AAL": Decimal("2")}

    def test_fractional_buy_rejected_by_default(self, store):
        store.create("T")

        with pytest.raises(FractionalBuyError):
            store.buy("T", "AAL", "1.5", MAY_1)

        assert store.get("T").is_empty()

    def test_whole_decimal_buy_accepted(self, store):
        store.create("T")

        store.buy("T", "AAL", Decimal("2.000"), MAY_1)

        assert store.get("T").get_holding("AAL").shares == Decimal("2")

    def test_fractional_buy_allowed_when_configured(self, prices):
        store = PortfolioStore(prices, clock=lambda: date(2024, 6, 28), require_whole_share_buys=False)
        store.create("T")

        store.buy("T", "AAL", "1.5", MAY_1)

        assert store.get("T").get_holding("AAL").shares == Decimal("1.5")

    def test_fractional_sell_allowed(self, store):
        store.create("T")
        store.buy("T", "AAL", 2, MAY_1)

        store.sell("T", "AAL", "0.25", MAY_3)

        assert store.get("T").get_holding("AAL").shares == Decimal("1.75")

    def test_clock_limits_valuation_dates(self, prices):
        store = PortfolioStore(prices, clock=lambda: MAY_3)
        store.create("T")

        with pytest.raises(FutureDateError):
            store.total_value("T", MAY_5)

    def test_rebalance_rejects_bad_weights(self, store):
        store.create("T")
        store.buy("T", "AAL", 1, MAY_1)
        store.buy("T", "MSFT", 1, MAY_1)

        with pytest.raises(WeightSumInvalidError):
            store.rebalance("T", [50, 40], MAY_5)

        assert store.get("T").watermark == MAY_1


# =============================================================================
# PERSISTENCE
# =============================================================================

class TestPersistence:
    """Tests for save and load with a real repository."""

    @pytest.fixture
    def repository(self, db):
        return LedgerRepository(db)

    def test_save_closes_ledger(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 3, MAY_1)

        handle = store.save("T", repository)

        assert handle == "T"
        assert "T" not in store
        assert repository.list_handles() == ["T"]

    def test_save_under_custom_handle(self, store, repository):
        store.create("T")

        assert store.save("T", repository, "backup") == "backup"
        assert repository.list_handles() == ["backup"]

    def test_load_restores_equal_ledger(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 3, MAY_1)
        store.buy("T", "MSFT", 2, MAY_3)
        original = store.get("T").snapshot()
        store.save("T", repository)

        loaded = store.load("T", repository)

        assert loaded.snapshot() == original
        assert store.get("T") is loaded

    def test_load_keeps_watermark(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 3, MAY_3)
        store.save("T", repository)

        store.load("T", repository)

        with pytest.raises(NonChronologicalOperationError):
            store.buy("T", "AAL", 1, MAY_1)

    def test_load_replaces_identical_active_ledger(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 3, MAY_1)
        store.save("T", repository, "copy")
        store.load("copy", repository)
        store.save("T", repository, "again")
        store.load("copy", repository)

        store.load("again", repository)

        assert store.names() == ["T"]

    def test_load_conflicting_ledger_rejected(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 3, MAY_1)
        store.save("T", repository)
        store.create("T")

        with pytest.raises(DuplicateNameError):
            store.load("T", repository)

        assert store.get("T").is_empty()

    def test_load_unknown_handle(self, store, repository):
        with pytest.raises(SnapshotNotFoundError):
            store.load("nothing", repository)

    def test_rebalanced_fractional_shares_survive_round_trip(self, store, repository):
        store.create("T")
        store.buy("T", "AAL", 10, MAY_1)
        store.buy("T", "MSFT", 1, MAY_1)
        store.rebalance("T", [30, 70], MAY_5)
        before = store.get("T").snapshot()
        store.save("T", repository)

        assert store.load("T", repository).snapshot() == before


# =============================================================================
# CONCURRENCY
# =============================================================================

class GatedPriceProvider(InMemoryPriceProvider):
    """Holds exact-date lookups for one date until the test releases them."""

    def __init__(self, gated_date: date) -> None:
        super().__init__(default_series())
        self.gated_date = gated_date
        self.entered = threading.Event()
        self.release = threading.Event()

    def get_record(self, ticker, on):
        if on == self.gated_date:
            self.entered.set()
            self.release.wait(timeout=5)
        return super().get_record(ticker, on)


class TestConcurrency:
    """Operations on one ledger are serialised."""

    def test_load_waits_for_buy_in_progress(self, db):
        prices = GatedPriceProvider(MAY_8)
        store = PortfolioStore(prices, clock=lambda: TODAY)
        repository = LedgerRepository(db)
        store.create("T")
        store.buy("T", "AAL", 3, MAY_1)
        store.save("T", repository, "backup")
        store.load("backup", repository)

        errors = []

        def load():
            try:
                store.load("backup", repository)
            except DuplicateNameError as e:
                errors.append(e)

        buyer = threading.Thread(target=store.buy, args=("T", "AAL", 5, MAY_8))
        loader = threading.Thread(target=load)
        buyer.start()
        assert prices.entered.wait(timeout=5)
        loader.start()
        loader.join(timeout=0.2)

        assert loader.is_alive()

        prices.release.set()
        buyer.join(timeout=5)
        loader.join(timeout=5)

        assert store.get("T").get_holding("AAL").shares == Decimal("8")
        assert len(errors) == 1
