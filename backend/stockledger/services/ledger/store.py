# backend/stockledger/services/ledger/store.py
"""
PortfolioStore - the set of active ledgers.

The store is an explicit context object: every caller that needs a ledger
gets it from a store instance rather than from process-wide state. It
supplies each ledger operation with the price provider and today's date
(through an injectable clock, so tests can pin "today").

Concurrency:
    HTTP handlers run in a threadpool, so each ledger has its own
    re-entrant lock and every operation on it holds that lock. The
    registry of names has a separate lock.

Usage:
    store = PortfolioStore(prices)
    store.create("Retirement")
    store.buy("Retirement", "AAL", 3, date(2023, 5, 1))
    store.total_value("Retirement", date(2023, 5, 2))
"""

import logging
import threading
from collections.abc import Callable
from datetime import date
from decimal import Decimal

from stockledger.services.exceptions import (
    DuplicateNameError,
    FractionalBuyError,
    InvalidNameError,
    PortfolioNotFoundError,
)
from stockledger.services.ledger.ledger import Ledger, to_shares
from stockledger.services.ledger.repository import LedgerRepository
from stockledger.services.market_data.base import PriceProvider
from stockledger.services.valuation.rebalance import RebalanceCalculator
from stockledger.services.valuation.types import RebalanceTrade

logger = logging.getLogger(__name__)


class PortfolioStore:
    """
    Active ledgers by name, plus the collaborators their operations need.

    Attributes:
        prices: Price provider used for trading-day checks and valuation
        clock: Returns today's date; valuation dates after it are rejected
        require_whole_share_buys: Reject fractional buys
    """

    def __init__(
            self,
            prices: PriceProvider,
            clock: Callable[[], date] = date.today,
            require_whole_share_buys: bool = True,
            rebalancer: RebalanceCalculator | None = None,
    ) -> None:
        self.prices = prices
        self.clock = clock
        self.require_whole_share_buys = require_whole_share_buys
        self._rebalancer = rebalancer or RebalanceCalculator()
        self._ledgers: dict[str, Ledger] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    # =========================================================================
    # REGISTRY
    # =========================================================================

    def create(self, name: str) -> Ledger:
        """
        Start a new empty ledger.

        Raises:
            InvalidNameError: Name is empty or blank
            DuplicateNameError: A ledger with this name is already active
        """
        if name is None or not name.strip():
            raise InvalidNameError(name)

        with self._registry_lock:
            if name in self._ledgers:
                raise DuplicateNameError(name)
            ledger = Ledger(name)
            self._register(ledger)

        logger.info(f"Created portfolio '{name}'", extra={"portfolio": name})
        return ledger

    def get(self, name: str) -> Ledger:
        """
        Raises:
            PortfolioNotFoundError: No active ledger with this name
        """
        with self._registry_lock:
            ledger = self._ledgers.get(name)
        if ledger is None:
            raise PortfolioNotFoundError(name)
        return ledger

    def names(self) -> list[str]:
        """Names of active ledgers, in creation order."""
        with self._registry_lock:
            return list(self._ledgers)

    def __contains__(self, name: str) -> bool:
        with self._registry_lock:
            return name in self._ledgers

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._ledgers)

    def _register(self, ledger: Ledger) -> None:
        self._ledgers[ledger.name] = ledger
        self._locks.setdefault(ledger.name, threading.RLock())

    def _lock_for(self, name: str) -> threading.RLock:
        with self._registry_lock:
            if name not in self._ledgers:
                raise PortfolioNotFoundError(name)
            return self._locks[name]

    # =========================================================================
    # TRADING
    # =========================================================================

    def buy(self, name: str, ticker: str, shares: Decimal | int | str, on: date) -> Ledger:
        """
        Buy shares of a ticker on a trading day.

        Raises:
            FractionalBuyError: Whole shares are required and `shares` isn't one
            (plus everything Ledger.update_holding raises)
        """
        shares = to_shares(shares)
        if self.require_whole_share_buys and shares != shares.to_integral_value():
            raise FractionalBuyError(shares)

        with self._lock_for(name):
            ledger = self.get(name)
            ledger.update_holding(ticker, shares, on, True, self.prices)

        logger.info(
            f"Bought {shares} {ticker} for portfolio '{name}' on {on}",
            extra={"portfolio": name, "ticker": ticker},
        )
        return ledger

    def sell(self, name: str, ticker: str, shares: Decimal | int | str, on: date) -> Ledger:
        """Sell shares of a held ticker; fractions are allowed."""
        shares = to_shares(shares)

        with self._lock_for(name):
            ledger = self.get(name)
            ledger.update_holding(ticker, shares, on, False, self.prices)

        logger.info(
            f"Sold {shares} {ticker} from portfolio '{name}' on {on}",
            extra={"portfolio": name, "ticker": ticker},
        )
        return ledger

    # =========================================================================
    # VALUATION
    # =========================================================================

    def total_value(self, name: str, on: date) -> Decimal:
        with self._lock_for(name):
            return self.get(name).total_value(on, self.prices, self.clock())

    def composition(self, name: str, on: date) -> dict[str, Decimal]:
        with self._lock_for(name):
            return self.get(name).composition(on, self.clock())

    def distribution(self, name: str, on: date) -> dict[str, Decimal]:
        with self._lock_for(name):
            return self.get(name).distribution(on, self.prices, self.clock())

    def rebalance(self, name: str, weights: list[int], on: date) -> list[RebalanceTrade]:
        """
        Rebalance a ledger to integer percentage weights (one per holding).

        Raises:
            WeightCountMismatchError: Wrong number of weights
            WeightSumInvalidError: Weights don't add up to 100
        """
        with self._lock_for(name):
            ledger = self.get(name)
            return self._rebalancer.rebalance(ledger, weights, on, self.prices, self.clock())

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self, name: str, repository: LedgerRepository, handle: str | None = None) -> str:
        """
        Persist a ledger and close it.

        The ledger leaves the active set once its snapshot is stored.

        Returns:
            The handle it was saved under (the ledger name by default)
        """
        with self._lock_for(name):
            ledger = self.get(name)
            saved_handle = repository.save(ledger.snapshot(), handle or name)
            with self._registry_lock:
                self._ledgers.pop(name, None)

        logger.info(f"Saved portfolio '{name}' as '{saved_handle}'", extra={"portfolio": name})
        return saved_handle

    def load(self, handle: str, repository: LedgerRepository) -> Ledger:
        """
        Restore a saved ledger into the active set.

        If a ledger with the same name is already active it is replaced when
        it is equal to the saved one. The comparison and the swap run under
        that ledger's lock, so a trade in progress finishes first.

        Raises:
            SnapshotNotFoundError: Nothing saved under `handle`
            DuplicateNameError: A different ledger with that name is active
        """
        loaded = Ledger.from_snapshot(repository.load(handle))

        with self._registry_lock:
            ledger_lock = self._locks.setdefault(loaded.name, threading.RLock())

        with ledger_lock:
            with self._registry_lock:
                active = self._ledgers.get(loaded.name)
                if active is not None and active != loaded:
                    raise DuplicateNameError(loaded.name)
                self._register(loaded)

        logger.info(f"Loaded portfolio '{loaded.name}' from '{handle}'", extra={"portfolio": loaded.name})
        return loaded
