# backend/stockledger/models.py
"""
Tables for saved portfolio snapshots.

A saved portfolio is addressed by its handle (the name it was saved
under, which may differ from the ledger's own name). Holdings keep their
position so a round trip restores the original order.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class DecimalText(TypeDecorator):
    """
    Decimal stored as its exact text form.

    Share counts produced by rebalancing carry more digits than a fixed
    Numeric column (or SQLite's float storage) keeps.
    """

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect) -> str | None:
        return None if value is None else str(value)

    def process_result_value(self, value: str | None, dialect) -> Decimal | None:
        return None if value is None else Decimal(value)


class SavedPortfolio(Base):
    __tablename__ = "saved_portfolios"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    handle: Mapped[str] = mapped_column(String, unique=True, index=True)
    name: Mapped[str] = mapped_column(String)
    watermark: Mapped[date | None] = mapped_column(Date, nullable=True)
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    holdings: Mapped[list["SavedHolding"]] = relationship(
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="SavedHolding.position",
    )


class SavedHolding(Base):
    __tablename__ = "saved_holdings"
    __table_args__ = (
        UniqueConstraint("portfolio_id", "position", name="uq_saved_holding_position"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    portfolio_id: Mapped[int] = mapped_column(ForeignKey("saved_portfolios.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    ticker: Mapped[str] = mapped_column(String(4))
    shares: Mapped[Decimal] = mapped_column(DecimalText)
    date_added: Mapped[date] = mapped_column(Date)

    portfolio: Mapped["SavedPortfolio"] = relationship(back_populates="holdings")
