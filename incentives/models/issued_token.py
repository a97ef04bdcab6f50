"""
Issued token model.

Non-fungible tokens held by the reference token service: one position token
per staker plus one badge per tier reached.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType


class IssuedToken(Base):
    """Issued non-fungible token."""

    __tablename__ = "issued_tokens"

    token_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    owner: Mapped[str] = mapped_column(
        AddressType, index=True, nullable=False
    )

    # position / badge (see TokenKind)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    tier_index: Mapped[int | None] = mapped_column(Integer, nullable=True)

    uri: Mapped[str] = mapped_column(Text, default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<IssuedToken(token_id={self.token_id}, owner={self.owner}, "
            f"kind={self.kind}, tier_index={self.tier_index})>"
        )
