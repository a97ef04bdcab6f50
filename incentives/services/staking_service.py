"""
Staking service.

Self-service stake, withdraw and harvest for a single account. Every call
settles accrual first, then mutates principal or rewards, then refreshes
the position token metadata.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.enums import EventType
from incentives.models.staker_account import StakerAccount
from incentives.repositories.staker_repository import StakerRepository
from incentives.services.accrual.reward_accrual import RewardAccrualEngine
from incentives.services.base_service import BaseService, transaction
from incentives.services.event_recorder import EventRecorder
from incentives.services.external.protocols import MintableBalance, TokenIssuer
from incentives.services.tier.tier_progression import TierProgressionEngine
from incentives.services.token_registry import TokenRegistry
from incentives.utils.exceptions import (
    InvalidAmount,
    NoRewardsToHarvest,
    UnknownAccount,
)
from incentives.utils.validation import require_positive_amount


@dataclass
class HarvestResult:
    """Result of a successful harvest."""

    amount: int
    rewards_earned: int
    current_tier: int
    tiers_crossed: list[int]
    badge_token_ids: list[int]


class StakingService(BaseService):
    """Stake / withdraw / harvest for one account per call."""

    def __init__(
        self,
        session: AsyncSession,
        accrual: RewardAccrualEngine,
        tiers: TierProgressionEngine,
        token_service: TokenIssuer,
        balance_service: MintableBalance,
        token_name: str | None = None,
        token_symbol: str | None = None,
    ) -> None:
        """
        Initialize staking service.

        Args:
            session: Async database session
            accrual: Reward accrual engine
            tiers: Tier progression engine
            token_service: External token issuer
            balance_service: Mintable reward token for payouts
            token_name: Position token display name
            token_symbol: Position token symbol
        """
        super().__init__(session)
        self.staker_repo = StakerRepository(session)
        self.accrual = accrual
        self.tiers = tiers
        self.balance_service = balance_service
        self.events = EventRecorder(session)

        registry_kwargs = {}
        if token_name:
            registry_kwargs["token_name"] = token_name
        if token_symbol:
            registry_kwargs["token_symbol"] = token_symbol
        self.registry = TokenRegistry(
            session, token_service, tiers, self.events, **registry_kwargs
        )

    @transaction
    async def stake(self, account: str, amount: int, now: int) -> StakerAccount:
        """
        Stake principal.

        Args:
            account: Checksummed caller address
            amount: Positive amount in base units
            now: Ledger time

        Returns:
            Updated staker account

        Raises:
            InvalidAmount: If amount is not positive
        """
        require_positive_amount(amount)

        staker = await self.staker_repo.get_or_create_for_update(account)
        self.accrual.settle(staker, now)

        staker.staked_amount = staker.staked_amount + amount
        if not staker.initialized:
            staker.initialized = True
        await self.session.flush()

        await self.events.record(
            EventType.STAKED,
            account,
            now,
            amount=amount,
            staked_amount=staker.staked_amount,
        )

        await self.registry.ensure_issued(staker, now)
        await self.registry.refresh_metadata(staker, now)

        return staker

    @transaction
    async def withdraw(self, account: str, amount: int, now: int) -> StakerAccount:
        """
        Withdraw principal.

        The time-weighted score keeps everything accrued before the
        withdrawal.

        Args:
            account: Checksummed caller address
            amount: Positive amount not exceeding the staked balance
            now: Ledger time

        Returns:
            Updated staker account

        Raises:
            UnknownAccount: If the account never staked
            InvalidAmount: If amount is not positive or exceeds the balance
        """
        require_positive_amount(amount)

        staker = await self.staker_repo.get_for_update(account)
        if staker is None or not staker.initialized:
            raise UnknownAccount(f"{account} has no stake")
        if amount > staker.staked_amount:
            raise InvalidAmount(
                f"Withdrawal {amount} exceeds staked balance {staker.staked_amount}"
            )

        self.accrual.settle(staker, now)
        staker.staked_amount = staker.staked_amount - amount
        await self.session.flush()

        await self.events.record(
            EventType.WITHDRAWN,
            account,
            now,
            amount=amount,
            staked_amount=staker.staked_amount,
        )

        await self.registry.refresh_metadata(staker, now)

        return staker

    @transaction
    async def harvest(self, account: str, now: int) -> HarvestResult:
        """
        Harvest pending rewards.

        Pending rewards are computed from the checkpoint as it stood before
        this call; settlement then advances the checkpoint to now.

        Args:
            account: Checksummed caller address
            now: Ledger time

        Returns:
            HarvestResult with the amount paid and any tier crossings

        Raises:
            NoRewardsToHarvest: If nothing is pending
        """
        staker = await self.staker_repo.get_for_update(account)

        pending = self.accrual.pending_reward(staker, now)
        if pending <= 0:
            raise NoRewardsToHarvest(f"{account} has no pending rewards")

        self.accrual.settle(staker, now)
        staker.rewards_earned = staker.rewards_earned + pending
        crossed = self.tiers.evaluate(staker)
        await self.session.flush()

        await self.events.record(
            EventType.REWARDS_HARVESTED,
            account,
            now,
            amount=pending,
            rewards_earned=staker.rewards_earned,
        )

        badge_ids = []
        for tier_index in crossed:
            badge_ids.append(
                await self.registry.issue_badge(staker, tier_index, now)
            )

        await self.registry.refresh_metadata(staker, now)
        await self.balance_service.mint(account, pending)

        return HarvestResult(
            amount=pending,
            rewards_earned=staker.rewards_earned,
            current_tier=staker.current_tier,
            tiers_crossed=crossed,
            badge_token_ids=badge_ids,
        )

    async def get_account(self, account: str) -> StakerAccount | None:
        """Get staker account without locking."""
        return await self.staker_repo.get_by_id(account)

    async def get_token_uri(self, account: str) -> str:
        """Get position token URI (raises UnknownAccount if never staked)."""
        staker = await self.staker_repo.get_by_id(account)
        return await self.registry.get_token_uri(staker)
