"""Fungible reward token balance held by the reference balance service."""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType, Uint256


class TokenBalance(Base):
    """Minted reward token balance per account."""

    __tablename__ = "token_balances"

    account: Mapped[str] = mapped_column(AddressType, primary_key=True)
    balance: Mapped[int] = mapped_column(Uint256, default=0, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<TokenBalance(account={self.account}, balance={self.balance})>"
