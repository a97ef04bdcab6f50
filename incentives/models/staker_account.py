"""
Staker account model.

Per-identity staking state: principal, accrual checkpoint, time-weighted
score, cumulative harvested rewards and current tier.
"""

from datetime import UTC, datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType, Uint256


class StakerAccount(Base):
    """Staker account - created on first touch, never deleted."""

    __tablename__ = "staker_accounts"
    __table_args__ = (
        CheckConstraint(
            "current_tier >= 0", name="check_staker_tier_non_negative"
        ),
        CheckConstraint(
            "last_checkpoint >= 0", name="check_staker_checkpoint_non_negative"
        ),
    )

    # Checksummed identity address
    account: Mapped[str] = mapped_column(AddressType, primary_key=True)

    # Principal and accrual state
    staked_amount: Mapped[int] = mapped_column(
        Uint256, default=0, nullable=False
    )
    last_checkpoint: Mapped[int] = mapped_column(
        BigInteger, default=0, nullable=False
    )
    time_weighted_score: Mapped[int] = mapped_column(
        Uint256, default=0, nullable=False
    )

    # Rewards and progression
    rewards_earned: Mapped[int] = mapped_column(
        Uint256, default=0, nullable=False
    )
    current_tier: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    # Lifecycle
    initialized: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    token_id: Mapped[int | None] = mapped_column(
        ForeignKey("issued_tokens.token_id"), nullable=True, unique=True
    )

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
            f"<StakerAccount(account={self.account}, "
            f"staked_amount={self.staked_amount}, "
            f"last_checkpoint={self.last_checkpoint}, "
            f"rewards_earned={self.rewards_earned}, "
            f"current_tier={self.current_tier})>"
        )
