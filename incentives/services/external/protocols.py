"""Interfaces of the external token services."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class MintableBalance(Protocol):
    """Fungible reward token that the ledger may mint into."""

    async def mint(self, account: str, amount: int) -> None:
        """Credit amount to account or raise."""
        ...

    async def balance_of(self, account: str) -> int:
        """Current balance of account."""
        ...


class TokenIssuer(Protocol):
    """Non-fungible token issuance and URI storage."""

    async def mint(
        self, owner: str, kind: str, tier_index: int | None = None
    ) -> int:
        """Issue a new token to owner and return its id."""
        ...

    async def set_token_uri(self, token_id: int, uri: str) -> None:
        """Replace the metadata URI of an existing token."""
        ...

    async def token_uri(self, token_id: int) -> str:
        """Metadata URI of an existing token."""
        ...

    async def owner_of(self, token_id: int) -> str:
        """Owner of an existing token."""
        ...

    async def tokens_of(self, owner: str, kind: str | None = None) -> list[int]:
        """Ids of tokens held by owner (optionally of one kind), in issuance order."""
        ...


class BalanceServiceFactory(Protocol):
    """Builds a balance service bound to a session."""

    def __call__(self, session: AsyncSession) -> MintableBalance:
        ...


class TokenServiceFactory(Protocol):
    """Builds a token service bound to a session."""

    def __call__(self, session: AsyncSession) -> TokenIssuer:
        ...
