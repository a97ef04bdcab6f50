"""
Incentive ledger facade.

Exposes every external entry point. Each mutating call holds the in-process
locks of the records it touches, opens its own session and runs as a single
transaction: it either commits all of its writes or none of them.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incentives.config.settings import settings
from incentives.config.tiers import DEFAULT_TIER_TABLE, TierConfig
from incentives.models.enums import EventType, TokenKind
from incentives.models.ledger_event import LedgerEvent
from incentives.models.program_settings import ProgramSettings
from incentives.repositories.event_repository import EventRepository
from incentives.services.accrual.reward_accrual import RewardAccrualEngine
from incentives.services.admin_service import AdminService
from incentives.services.external.balance_service import BalanceLedgerService
from incentives.services.external.protocols import (
    BalanceServiceFactory,
    TokenServiceFactory,
)
from incentives.services.external.token_service import TokenLedgerService
from incentives.services.referral.graph_manager import ReferralGraphManager
from incentives.services.referral.referral_service import (
    ReferralResult,
    ReferralService,
)
from incentives.services.staking_service import HarvestResult, StakingService
from incentives.services.tier.tier_progression import TierProgressionEngine
from incentives.utils.exceptions import ConfigurationError
from incentives.utils.locks import (
    PROGRAM_SETTINGS_KEY,
    REFERRAL_GRAPH_KEY,
    KeyedLockRegistry,
)
from incentives.utils.validation import normalize_address


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


@dataclass(frozen=True)
class UserInfo:
    """Snapshot of a staker account."""

    account: str
    staked_amount: int
    last_checkpoint: int
    time_weighted_score: int
    rewards_earned: int
    current_tier: int
    tier_name: str
    initialized: bool
    token_id: int | None
    pending_rewards: int


class IncentiveLedger:
    """Entry points of the incentive ledger."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        accrual: RewardAccrualEngine | None = None,
        tiers: TierProgressionEngine | None = None,
        clock: Callable[[], int] = system_clock,
        balance_service_factory: BalanceServiceFactory = BalanceLedgerService,
        token_service_factory: TokenServiceFactory = TokenLedgerService,
        token_name: str | None = None,
        token_symbol: str | None = None,
        locks: KeyedLockRegistry | None = None,
    ) -> None:
        """
        Initialize ledger.

        Args:
            session_maker: Async session factory
            accrual: Reward accrual engine (settings rates by default)
            tiers: Tier engine (default tier table by default)
            clock: Returns current ledger time in unix seconds
            balance_service_factory: Builds the mintable balance per session
            token_service_factory: Builds the token issuer per session
            token_name: Position token display name
            token_symbol: Position token symbol
            locks: Shared lock registry (one per process by default)
        """
        self._session_maker = session_maker
        self.accrual = accrual or RewardAccrualEngine(
            rate=settings.reward_rate,
            rate_denominator=settings.reward_rate_denominator,
            seconds_per_year=settings.seconds_per_year,
        )
        self.tiers = tiers or TierProgressionEngine(DEFAULT_TIER_TABLE)
        self._clock = clock
        self._balance_service_factory = balance_service_factory
        self._token_service_factory = token_service_factory
        self._token_name = token_name or settings.token_name
        self._token_symbol = token_symbol or settings.token_symbol
        self._locks = locks if locks is not None else KeyedLockRegistry()

    def now(self) -> int:
        """Current ledger time."""
        return int(self._clock())

    def _staking(self, session: AsyncSession) -> StakingService:
        return StakingService(
            session,
            self.accrual,
            self.tiers,
            self._token_service_factory(session),
            self._balance_service_factory(session),
            token_name=self._token_name,
            token_symbol=self._token_symbol,
        )

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def bootstrap(
        self,
        owner: str | None = None,
        authorized_backend: str | None = None,
        referrer_reward: int | None = None,
        referee_reward: int | None = None,
    ) -> ProgramSettings:
        """
        Create program settings on first run.

        Missing arguments fall back to settings. An already bootstrapped
        ledger keeps its persisted state.

        Raises:
            ConfigurationError: If no owner is configured
        """
        owner = owner or settings.owner_address
        if not owner:
            raise ConfigurationError("Owner address is required to bootstrap")
        authorized_backend = (
            authorized_backend or settings.authorized_backend_address or owner
        )

        async with self._locks.hold(PROGRAM_SETTINGS_KEY):
            async with self._session_maker() as session:
                program = await AdminService(session).bootstrap(
                    owner,
                    authorized_backend,
                    settings.default_referrer_reward if referrer_reward is None else referrer_reward,
                    settings.default_referee_reward if referee_reward is None else referee_reward,
                )

        logger.info(
            "Ledger ready",
            extra={"owner": program.owner, "tiers": len(self.tiers.table)},
        )
        return program

    async def set_authorized_backend(self, caller: str, identity: str) -> ProgramSettings:
        """Reassign the authorized backend (owner only)."""
        async with self._locks.hold(PROGRAM_SETTINGS_KEY):
            async with self._session_maker() as session:
                return await AdminService(session).set_authorized_backend(
                    caller, identity, self.now()
                )

    async def set_reward_amounts(
        self, caller: str, referrer_amount: int, referee_amount: int
    ) -> ProgramSettings:
        """Reconfigure referral bounties (owner only)."""
        async with self._locks.hold(PROGRAM_SETTINGS_KEY):
            async with self._session_maker() as session:
                return await AdminService(session).set_reward_amounts(
                    caller, referrer_amount, referee_amount, self.now()
                )

    async def transfer_ownership(self, caller: str, new_owner: str) -> ProgramSettings:
        """Hand the owner role to another identity (owner only)."""
        async with self._locks.hold(PROGRAM_SETTINGS_KEY):
            async with self._session_maker() as session:
                return await AdminService(session).transfer_ownership(
                    caller, new_owner, self.now()
                )

    async def get_owner(self) -> str:
        """Current administrative owner."""
        return (await self._get_settings()).owner

    async def get_authorized_backend(self) -> str:
        """Current authorized backend identity."""
        return (await self._get_settings()).authorized_backend

    async def get_reward_amounts(self) -> tuple[int, int]:
        """Current (referrer_reward, referee_reward)."""
        program = await self._get_settings()
        return program.referrer_reward, program.referee_reward

    async def _get_settings(self) -> ProgramSettings:
        async with self._session_maker() as session:
            return await AdminService(session).get_settings()

    # ------------------------------------------------------------------
    # Staking
    # ------------------------------------------------------------------

    async def stake(self, caller: str, amount: int) -> UserInfo:
        """Stake amount for the caller."""
        account = normalize_address(caller)
        async with self._locks.hold(account):
            async with self._session_maker() as session:
                now = self.now()
                staker = await self._staking(session).stake(account, amount, now)
                return self._snapshot(staker, now)

    async def withdraw(self, caller: str, amount: int) -> UserInfo:
        """Withdraw amount of the caller's principal."""
        account = normalize_address(caller)
        async with self._locks.hold(account):
            async with self._session_maker() as session:
                now = self.now()
                staker = await self._staking(session).withdraw(account, amount, now)
                return self._snapshot(staker, now)

    async def harvest_rewards(self, caller: str) -> HarvestResult:
        """Harvest the caller's pending rewards."""
        account = normalize_address(caller)
        async with self._locks.hold(account):
            async with self._session_maker() as session:
                return await self._staking(session).harvest(account, self.now())

    async def pending_rewards(self, account: str) -> int:
        """Accrued but unpaid rewards of an account (0 if unknown)."""
        account = normalize_address(account)
        async with self._session_maker() as session:
            staker = await self._staking(session).get_account(account)
            return self.accrual.pending_reward(staker, self.now())

    async def get_user_info(self, account: str) -> UserInfo:
        """Full state snapshot of an account (zeroed if never touched)."""
        account = normalize_address(account)
        async with self._session_maker() as session:
            staker = await self._staking(session).get_account(account)
            now = self.now()
            if staker is None:
                return UserInfo(
                    account=account,
                    staked_amount=0,
                    last_checkpoint=0,
                    time_weighted_score=0,
                    rewards_earned=0,
                    current_tier=0,
                    tier_name=self.tiers.tier_name(0),
                    initialized=False,
                    token_id=None,
                    pending_rewards=0,
                )
            return self._snapshot(staker, now)

    def _snapshot(self, staker, now: int) -> UserInfo:
        return UserInfo(
            account=staker.account,
            staked_amount=staker.staked_amount,
            last_checkpoint=staker.last_checkpoint,
            time_weighted_score=staker.time_weighted_score,
            rewards_earned=staker.rewards_earned,
            current_tier=staker.current_tier,
            tier_name=self.tiers.tier_name(staker.current_tier),
            initialized=staker.initialized,
            token_id=staker.token_id,
            pending_rewards=self.accrual.pending_reward(staker, now),
        )

    async def get_token_uri(self, account: str) -> str:
        """Position token metadata URI (UnknownAccount if never staked)."""
        account = normalize_address(account)
        async with self._session_maker() as session:
            return await self._staking(session).get_token_uri(account)

    def tier_name(self, index: int) -> str:
        """Tier display name (IndexOutOfRange outside 0..len(table))."""
        return self.tiers.tier_name(index)

    def get_tier_table(self) -> tuple[TierConfig, ...]:
        """Configured tier table."""
        return self.tiers.table

    async def get_tokens_of(
        self, account: str, kind: TokenKind | str | None = None
    ) -> list[int]:
        """Token ids held by an account, optionally only positions or badges."""
        account = normalize_address(account)
        if isinstance(kind, TokenKind):
            kind = kind.value
        async with self._session_maker() as session:
            return await self._token_service_factory(session).tokens_of(account, kind)

    async def owner_of(self, token_id: int) -> str:
        """Holder of a token (IndexOutOfRange if it does not exist)."""
        async with self._session_maker() as session:
            return await self._token_service_factory(session).owner_of(token_id)

    async def balance_of(self, account: str) -> int:
        """Reward token balance of an account."""
        account = normalize_address(account)
        async with self._session_maker() as session:
            return await self._balance_service_factory(session).balance_of(account)

    # ------------------------------------------------------------------
    # Referrals
    # ------------------------------------------------------------------

    async def process_referral(
        self, caller: str, referee: str, referrer: str
    ) -> ReferralResult:
        """Register referee -> referrer and pay bounties (backend only)."""
        # Malformed identities are rejected before any lock is taken
        referee = normalize_address(referee)
        referrer = normalize_address(referrer)

        async with self._locks.hold(REFERRAL_GRAPH_KEY, referee, referrer):
            async with self._session_maker() as session:
                service = ReferralService(
                    session, self._balance_service_factory(session)
                )
                return await service.process_referral(
                    caller, referee, referrer, self.now()
                )

    async def get_referees(self, referrer: str) -> list[str]:
        """Direct referees of a referrer in registration order."""
        async with self._session_maker() as session:
            return await ReferralGraphManager(session).list_children(referrer)

    async def get_referee_count(self, referrer: str) -> int:
        """Number of direct referees of a referrer."""
        async with self._session_maker() as session:
            return await ReferralGraphManager(session).count_children(referrer)

    async def get_referrer(self, referee: str) -> str | None:
        """Referrer of an identity, or None."""
        async with self._session_maker() as session:
            return await ReferralGraphManager(session).get_referrer(referee)

    async def get_referral_chain(self, account: str) -> list[str]:
        """Ancestors of an identity, nearest referrer first."""
        account = normalize_address(account)
        async with self._session_maker() as session:
            return await ReferralGraphManager(session).get_referral_chain(account)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def get_events(
        self,
        event_type: EventType | str | None = None,
        actor: str | None = None,
        after_id: int | None = None,
        limit: int | None = None,
    ) -> list[LedgerEvent]:
        """Recorded events in emission order."""
        if actor:
            actor = normalize_address(actor)
        if isinstance(event_type, EventType):
            event_type = event_type.value
        async with self._session_maker() as session:
            return await EventRepository(session).get_events(
                event_type=event_type, actor=actor, after_id=after_id, limit=limit
            )
