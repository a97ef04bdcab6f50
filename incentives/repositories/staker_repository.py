"""
Staker repository.

Data access layer for StakerAccount model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.staker_account import StakerAccount
from incentives.repositories.base import BaseRepository


class StakerRepository(BaseRepository[StakerAccount]):
    """Staker account repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize staker repository."""
        super().__init__(StakerAccount, session)

    async def get_or_create_for_update(self, account: str) -> StakerAccount:
        """
        Get locked staker account, creating a blank one on first touch.

        Args:
            account: Checksummed account address

        Returns:
            Staker account (flushed, so it is visible to later queries)
        """
        staker = await self.get_for_update(account)
        if staker is not None:
            return staker

        return await self.create(
            account=account,
            staked_amount=0,
            last_checkpoint=0,
            time_weighted_score=0,
            rewards_earned=0,
            current_tier=0,
            initialized=False,
        )
