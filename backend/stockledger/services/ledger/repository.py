# backend/stockledger/services/ledger/repository.py
"""
Snapshot persistence for ledgers.

The repository receives a session (it doesn't create one) and stores
each snapshot under a handle. Saving under an existing handle replaces
the previous snapshot.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.models import SavedHolding, SavedPortfolio
from stockledger.services.exceptions import SnapshotNotFoundError
from stockledger.services.ledger.types import Holding, LedgerSnapshot

logger = logging.getLogger(__name__)


class LedgerRepository:
    """Reads and writes LedgerSnapshots through SQLAlchemy."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def save(self, snapshot: LedgerSnapshot, handle: str) -> str:
        """
        Store a snapshot under `handle`, replacing whatever was there.

        Returns:
            The handle
        """
        record = self._find(handle)
        if record is None:
            record = SavedPortfolio(handle=handle)
            self._db.add(record)

        record.name = snapshot.name
        record.watermark = snapshot.watermark
        # Old rows must be gone before new ones reuse their positions
        record.holdings.clear()
        self._db.flush()
        record.holdings = [
            SavedHolding(
                position=position,
                ticker=holding.ticker,
                shares=holding.shares,
                date_added=holding.date_added,
            )
            for position, holding in enumerate(snapshot.holdings)
        ]

        self._db.commit()
        logger.debug(f"Stored snapshot of '{snapshot.name}' under '{handle}'")
        return handle

    def load(self, handle: str) -> LedgerSnapshot:
        """
        Raises:
            SnapshotNotFoundError: Nothing saved under `handle`
        """
        record = self._find(handle)
        if record is None:
            raise SnapshotNotFoundError(handle)

        return LedgerSnapshot(
            name=record.name,
            watermark=record.watermark,
            holdings=tuple(
                Holding(ticker=h.ticker, shares=h.shares, date_added=h.date_added)
                for h in sorted(record.holdings, key=lambda h: h.position)
            ),
        )

    def list_handles(self) -> list[str]:
        return list(self._db.scalars(select(SavedPortfolio.handle).order_by(SavedPortfolio.handle)))

    def _find(self, handle: str) -> SavedPortfolio | None:
        return self._db.scalars(
            select(SavedPortfolio).where(SavedPortfolio.handle == handle)
        ).first()
