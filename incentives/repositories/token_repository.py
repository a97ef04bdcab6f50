"""
Token repository.

Data access layer for IssuedToken model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.issued_token import IssuedToken
from incentives.repositories.base import BaseRepository


class TokenRepository(BaseRepository[IssuedToken]):
    """Issued token repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize token repository."""
        super().__init__(IssuedToken, session)

    async def get_by_owner(
        self, owner: str, kind: str | None = None
    ) -> list[IssuedToken]:
        """
        Get tokens held by an owner in issuance order.

        Args:
            owner: Checksummed owner address
            kind: Optional token kind filter

        Returns:
            List of tokens
        """
        stmt = select(IssuedToken).where(IssuedToken.owner == owner)
        if kind:
            stmt = stmt.where(IssuedToken.kind == kind)
        stmt = stmt.order_by(IssuedToken.token_id)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
