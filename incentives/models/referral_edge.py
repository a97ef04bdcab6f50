"""
Referral edge model.

Directed referee -> referrer pointer. Each referee appears at most once, so
the edges form a parent-pointer forest.
"""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType


class ReferralEdge(Base):
    """Referral edge - immutable once written."""

    __tablename__ = "referral_edges"
    __table_args__ = (
        CheckConstraint(
            "referee <> referrer", name="check_referral_not_self"
        ),
        Index("idx_referral_referrer", "referrer", "id"),
    )

    # Insertion order doubles as the referrer's child-list order
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    referee: Mapped[str] = mapped_column(
        AddressType, unique=True, nullable=False
    )
    referrer: Mapped[str] = mapped_column(AddressType, nullable=False)

    # Ledger timestamp of registration (unix seconds)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralEdge(id={self.id}, referee={self.referee}, "
            f"referrer={self.referrer})>"
        )
