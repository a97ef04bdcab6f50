"""
Representational token registry.

Maps each staker to one position token whose metadata mirrors the staker's
current state, and issues a badge token per tier reached. Minting and URI
storage are delegated to the external token service.
"""

import base64
import json
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.config.business_constants import DEFAULT_TOKEN_NAME, DEFAULT_TOKEN_SYMBOL
from incentives.models.enums import EventType, TokenKind
from incentives.models.staker_account import StakerAccount
from incentives.services.base_service import BaseService
from incentives.services.event_recorder import EventRecorder
from incentives.services.external.protocols import TokenIssuer
from incentives.services.tier.tier_progression import TierProgressionEngine
from incentives.utils.exceptions import UnknownAccount


TOKEN_URI_PREFIX = "data:application/json;base64,"


def encode_token_uri(metadata: dict[str, Any]) -> str:
    """Encode metadata as a base64 JSON data URI."""
    document = json.dumps(metadata, separators=(",", ":"), sort_keys=False)
    return TOKEN_URI_PREFIX + base64.b64encode(document.encode("utf-8")).decode("ascii")


def decode_token_uri(uri: str) -> dict[str, Any]:
    """
    Decode a data URI produced by encode_token_uri.

    Raises:
        ValueError: If the URI is not a base64 JSON data URI
    """
    if not uri.startswith(TOKEN_URI_PREFIX):
        raise ValueError("Not a base64 JSON data URI")
    return json.loads(base64.b64decode(uri[len(TOKEN_URI_PREFIX):]))


def build_position_metadata(
    account: StakerAccount,
    token_id: int,
    tier_name: str,
    token_name: str = DEFAULT_TOKEN_NAME,
    token_symbol: str = DEFAULT_TOKEN_SYMBOL,
) -> dict[str, Any]:
    """
    Build position token metadata from current account state.

    Pure function of the account: regenerating it never depends on the
    previous URI.
    """
    return {
        "name": f"{token_name} #{token_id}",
        "symbol": token_symbol,
        "description": f"Staking position of {account.account}",
        "attributes": [
            {"trait_type": "Staked Amount", "value": str(account.staked_amount)},
            {"trait_type": "Time Weighted Score", "value": str(account.time_weighted_score)},
            {"trait_type": "Rewards Earned", "value": str(account.rewards_earned)},
            {"trait_type": "Tier", "value": tier_name},
        ],
    }


def build_badge_metadata(
    owner: str, token_id: int, tier_index: int, tier_name: str
) -> dict[str, Any]:
    """Build badge metadata for a reached tier (tier_index is zero-based)."""
    return {
        "name": f"{tier_name} Badge #{token_id}",
        "description": f"Tier {tier_index + 1} ({tier_name}) reached by {owner}",
        "attributes": [
            {"trait_type": "Tier", "value": tier_name},
            {"trait_type": "Tier Level", "value": tier_index + 1},
        ],
    }


class TokenRegistry(BaseService):
    """Glue between staker accounts and the external token service."""

    def __init__(
        self,
        session: AsyncSession,
        token_service: TokenIssuer,
        tier_engine: TierProgressionEngine,
        events: EventRecorder,
        token_name: str = DEFAULT_TOKEN_NAME,
        token_symbol: str = DEFAULT_TOKEN_SYMBOL,
    ) -> None:
        """
        Initialize token registry.

        Args:
            session: Async database session
            token_service: External token issuer
            tier_engine: Tier lookup for metadata names
            events: Event recorder of the current transaction
            token_name: Display name prefix for position tokens
            token_symbol: Position token symbol
        """
        super().__init__(session)
        self.token_service = token_service
        self.tier_engine = tier_engine
        self.events = events
        self.token_name = token_name
        self.token_symbol = token_symbol

    async def ensure_issued(self, account: StakerAccount, now: int) -> int:
        """
        Issue the position token on first stake.

        Args:
            account: Staker account (token_id is recorded on it)
            now: Ledger time

        Returns:
            Position token id
        """
        if account.token_id is not None:
            return account.token_id

        token_id = await self.token_service.mint(
            account.account, TokenKind.POSITION.value
        )
        account.token_id = token_id
        await self.session.flush()

        await self.events.record(
            EventType.TOKEN_ISSUED,
            account.account,
            now,
            token_id=token_id,
            kind=TokenKind.POSITION.value,
        )
        return token_id

    async def refresh_metadata(self, account: StakerAccount, now: int) -> str | None:
        """
        Regenerate and store position metadata.

        No-op for uninitialized accounts, which hold no token.

        Returns:
            New token URI, or None if nothing was refreshed
        """
        if not account.initialized or account.token_id is None:
            return None

        metadata = build_position_metadata(
            account,
            account.token_id,
            self.tier_engine.tier_name(account.current_tier),
            self.token_name,
            self.token_symbol,
        )
        uri = encode_token_uri(metadata)
        await self.token_service.set_token_uri(account.token_id, uri)

        await self.events.record(
            EventType.METADATA_UPDATED,
            account.account,
            now,
            token_id=account.token_id,
        )
        return uri

    async def issue_badge(self, account: StakerAccount, tier_index: int, now: int) -> int:
        """
        Issue a badge for a reached tier.

        Args:
            account: Staker account
            tier_index: Zero-based tier table index
            now: Ledger time

        Returns:
            Badge token id
        """
        name = self.tier_engine.tier_name(tier_index + 1)

        await self.events.record(
            EventType.TIER_ACHIEVED,
            account.account,
            now,
            tier_index=tier_index,
            tier=tier_index + 1,
            tier_name=name,
            rewards_earned=account.rewards_earned,
        )

        token_id = await self.token_service.mint(
            account.account, TokenKind.BADGE.value, tier_index
        )
        uri = encode_token_uri(
            build_badge_metadata(account.account, token_id, tier_index, name)
        )
        await self.token_service.set_token_uri(token_id, uri)

        await self.events.record(
            EventType.TOKEN_ISSUED,
            account.account,
            now,
            token_id=token_id,
            kind=TokenKind.BADGE.value,
            tier_index=tier_index,
        )
        return token_id

    async def get_token_uri(self, account: StakerAccount | None) -> str:
        """
        Get the position token URI of an account.

        Raises:
            UnknownAccount: If the account never staked
        """
        if account is None or not account.initialized or account.token_id is None:
            raise UnknownAccount("Account has no position token")
        return await self.token_service.token_uri(account.token_id)
