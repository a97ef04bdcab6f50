"""
Ledger event model.

Append-only audit log of observable events, ordered by id.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType, PayloadType


class LedgerEvent(Base):
    """Ledger event - never updated or deleted."""

    __tablename__ = "ledger_events"
    __table_args__ = (
        Index("idx_ledger_event_type", "event_type", "id"),
        Index("idx_ledger_event_actor", "actor", "id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    actor: Mapped[str] = mapped_column(AddressType, nullable=False)

    # Ledger clock at emission (unix seconds)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(
        PayloadType, default=dict, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<LedgerEvent(id={self.id}, event_type={self.event_type}, "
            f"actor={self.actor}, timestamp={self.timestamp})>"
        )
