"""
Reference mintable balance service.

Keeps reward token balances in the ledger database so mints commit or roll
back together with the operation that triggered them.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.repositories.balance_repository import BalanceRepository
from incentives.services.base_service import BaseService
from incentives.utils.validation import require_positive_amount


class BalanceLedgerService(BaseService):
    """Database-backed MintableBalance."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize balance service."""
        super().__init__(session)
        self.balance_repo = BalanceRepository(session)

    async def mint(self, account: str, amount: int) -> None:
        """
        Mint reward tokens to an account.

        Args:
            account: Checksummed recipient
            amount: Positive amount in base units

        Raises:
            InvalidAmount: If amount is not positive
        """
        require_positive_amount(amount)

        row = await self.balance_repo.get_or_create_for_update(account)
        row.balance = row.balance + amount
        await self.session.flush()

        self.logger.debug(
            "Minted reward tokens",
            extra={"account": account, "amount": amount, "balance": row.balance},
        )

    async def balance_of(self, account: str) -> int:
        """Get reward token balance (0 for unknown accounts)."""
        row = await self.balance_repo.get_by_id(account)
        return row.balance if row else 0
