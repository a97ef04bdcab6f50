"""
Referral repository.

Data access layer for ReferralEdge model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.referral_edge import ReferralEdge
from incentives.repositories.base import BaseRepository


class ReferralRepository(BaseRepository[ReferralEdge]):
    """Referral edge repository with forest queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral repository."""
        super().__init__(ReferralEdge, session)

    async def get_referrer_of(self, referee: str) -> str | None:
        """
        Get the referrer assigned to a referee.

        Args:
            referee: Checksummed referee address

        Returns:
            Referrer address or None if referee is unassigned
        """
        stmt = select(ReferralEdge.referrer).where(
            ReferralEdge.referee == referee
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_children(self, referrer: str) -> list[str]:
        """
        Get direct referees of a referrer in registration order.

        Args:
            referrer: Checksummed referrer address

        Returns:
            List of referee addresses
        """
        stmt = (
            select(ReferralEdge.referee)
            .where(ReferralEdge.referrer == referrer)
            .order_by(ReferralEdge.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_children(self, referrer: str) -> int:
        """
        Count direct referees of a referrer.

        Args:
            referrer: Checksummed referrer address

        Returns:
            Number of referees
        """
        return await self.count(referrer=referrer)
