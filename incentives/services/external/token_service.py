"""
Reference token issuance service.

Issues non-fungible tokens and stores their metadata URIs in the ledger
database.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.issued_token import IssuedToken
from incentives.repositories.token_repository import TokenRepository
from incentives.services.base_service import BaseService
from incentives.utils.exceptions import IndexOutOfRange


class TokenLedgerService(BaseService):
    """Database-backed TokenIssuer."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize token service."""
        super().__init__(session)
        self.token_repo = TokenRepository(session)

    async def mint(
        self, owner: str, kind: str, tier_index: int | None = None
    ) -> int:
        """
        Issue a new token.

        Args:
            owner: Checksummed owner address
            kind: Token kind (position / badge)
            tier_index: Tier carried by a badge

        Returns:
            New token id
        """
        token = await self.token_repo.create(
            owner=owner, kind=kind, tier_index=tier_index, uri=""
        )
        return token.token_id

    async def set_token_uri(self, token_id: int, uri: str) -> None:
        """Replace the metadata URI of an existing token."""
        token = await self._get_token(token_id)
        token.uri = uri
        await self.session.flush()

    async def token_uri(self, token_id: int) -> str:
        """Get metadata URI of an existing token."""
        token = await self._get_token(token_id)
        return token.uri

    async def owner_of(self, token_id: int) -> str:
        """Get owner of an existing token."""
        token = await self._get_token(token_id)
        return token.owner

    async def tokens_of(self, owner: str, kind: str | None = None) -> list[int]:
        """Get ids of tokens held by owner, optionally of one kind."""
        tokens = await self.token_repo.get_by_owner(owner, kind)
        return [token.token_id for token in tokens]

    async def _get_token(self, token_id: int) -> IssuedToken:
        token = await self.token_repo.get_by_id(token_id)
        if token is None:
            raise IndexOutOfRange(f"Token {token_id} does not exist")
        return token
