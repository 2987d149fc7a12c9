# backend/stockledger/services/ledger/types.py
"""
Value types of the ledger.

Holdings and snapshots are immutable; the Ledger replaces a holding rather
than editing it in place, which keeps snapshots safe to share.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class Holding:
    """
    A position in one ticker.

    Attributes:
        ticker: 1-4 uppercase letters
        shares: Shares held, always > 0
        date_added: Date of the most recent buy or partial sell
    """

    ticker: str
    shares: Decimal
    date_added: date

    def __post_init__(self) -> None:
        if self.shares <= 0:
            raise ValueError(f"shares must be positive, got {self.shares}")


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable copy of a ledger's state, used for persistence and comparison."""

    name: str
    watermark: date | None
    holdings: tuple[Holding, ...] = ()
