"""
Program settings model.

Single-row table holding the administrative roles and referral bounty
amounts.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from incentives.models.base import Base
from incentives.models.types import AddressType, Uint256


# Primary key of the only row
PROGRAM_SETTINGS_ID = 1


class ProgramSettings(Base):
    """Process-wide administrative state."""

    __tablename__ = "program_settings"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=PROGRAM_SETTINGS_ID
    )

    # Roles
    owner: Mapped[str] = mapped_column(AddressType, nullable=False)
    authorized_backend: Mapped[str] = mapped_column(
        AddressType, nullable=False
    )

    # Referral bounties (base units)
    referrer_reward: Mapped[int] = mapped_column(Uint256, nullable=False)
    referee_reward: Mapped[int] = mapped_column(Uint256, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ProgramSettings(owner={self.owner}, "
            f"authorized_backend={self.authorized_backend}, "
            f"referrer_reward={self.referrer_reward}, "
            f"referee_reward={self.referee_reward})>"
        )
