"""
Balance repository.

Data access layer for TokenBalance model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.token_balance import TokenBalance
from incentives.repositories.base import BaseRepository


class BalanceRepository(BaseRepository[TokenBalance]):
    """Reward token balance repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize balance repository."""
        super().__init__(TokenBalance, session)

    async def get_or_create_for_update(self, account: str) -> TokenBalance:
        """Get locked balance row, creating a zero balance if missing."""
        balance = await self.get_for_update(account)
        if balance is not None:
            return balance
        return await self.create(account=account, balance=0)
