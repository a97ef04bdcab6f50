"""
Referral service.

Authorized registration of referral edges followed by bounty distribution.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.enums import EventType
from incentives.repositories.program_settings_repository import (
    ProgramSettingsRepository,
)
from incentives.services.base_service import BaseService, transaction
from incentives.services.event_recorder import EventRecorder
from incentives.services.external.protocols import MintableBalance
from incentives.services.referral.graph_manager import ReferralGraphManager
from incentives.services.reward_distributor import RewardDistributor
from incentives.utils.exceptions import Unauthorized
from incentives.utils.validation import normalize_address


@dataclass
class ReferralResult:
    """Result of a successful referral registration."""

    referee: str
    referrer: str
    registered_at: int
    referrer_reward: int
    referee_reward: int


class ReferralService(BaseService):
    """Referral registration entry point."""

    def __init__(
        self, session: AsyncSession, balance_service: MintableBalance
    ) -> None:
        """
        Initialize referral service.

        Args:
            session: Async database session
            balance_service: Mintable reward token for bounties
        """
        super().__init__(session)
        self.settings_repo = ProgramSettingsRepository(session)
        self.graph = ReferralGraphManager(session)
        self.distributor = RewardDistributor(balance_service)
        self.events = EventRecorder(session)

    @transaction
    async def process_referral(
        self, caller: str, referee: str, referrer: str, now: int
    ) -> ReferralResult:
        """
        Register referee -> referrer and pay both bounties.

        Args:
            caller: Calling identity, must be the authorized backend
            referee: Identity being referred
            referrer: Identity credited with the referral
            now: Ledger time

        Returns:
            ReferralResult with the amounts minted

        Raises:
            Unauthorized: If caller is not the authorized backend
            InvalidAddress: If an identity is empty, zero or malformed
            SelfReferral, AlreadyReferred, CircularReferral: See graph manager
        """
        caller = normalize_address(caller)
        program = await self.settings_repo.get_current()

        if caller != program.authorized_backend:
            raise Unauthorized(f"{caller} is not the authorized backend")

        edge = await self.graph.register(referee, referrer, now)

        await self.events.record(
            EventType.REFERRAL_REGISTERED,
            caller,
            now,
            referee=edge.referee,
            referrer=edge.referrer,
            registered_at=edge.registered_at,
        )

        referrer_reward, referee_reward = await self.distributor.distribute(
            edge.referee,
            edge.referrer,
            referee_bounty=program.referee_reward,
            referrer_bounty=program.referrer_reward,
        )

        await self.events.record(
            EventType.REWARDS_DISTRIBUTED,
            caller,
            now,
            referee=edge.referee,
            referrer=edge.referrer,
            referrer_reward=referrer_reward,
            referee_reward=referee_reward,
        )

        return ReferralResult(
            referee=edge.referee,
            referrer=edge.referrer,
            registered_at=edge.registered_at,
            referrer_reward=referrer_reward,
            referee_reward=referee_reward,
        )
