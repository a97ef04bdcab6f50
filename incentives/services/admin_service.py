"""
Admin service.

Owner-gated reconfiguration of roles and referral bounties. Invalid values
are rejected at assignment time.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.enums import EventType
from incentives.models.program_settings import PROGRAM_SETTINGS_ID, ProgramSettings
from incentives.repositories.program_settings_repository import (
    ProgramSettingsRepository,
)
from incentives.services.base_service import BaseService, transaction
from incentives.services.event_recorder import EventRecorder
from incentives.utils.exceptions import Unauthorized
from incentives.utils.validation import (
    normalize_address,
    require_non_negative_amount,
)


class AdminService(BaseService):
    """Administrative owner operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize admin service."""
        super().__init__(session)
        self.settings_repo = ProgramSettingsRepository(session)
        self.events = EventRecorder(session)

    @transaction
    async def bootstrap(
        self,
        owner: str,
        authorized_backend: str,
        referrer_reward: int,
        referee_reward: int,
    ) -> ProgramSettings:
        """
        Create the program settings row if absent.

        Idempotent: an existing row is returned unchanged.

        Args:
            owner: Administrative owner
            authorized_backend: Identity allowed to register referrals
            referrer_reward: Initial referrer bounty
            referee_reward: Initial referee bounty

        Returns:
            Current program settings
        """
        existing = await self.settings_repo.get_by_id(PROGRAM_SETTINGS_ID)
        if existing is not None:
            return existing

        program = await self.settings_repo.create(
            id=PROGRAM_SETTINGS_ID,
            owner=normalize_address(owner),
            authorized_backend=normalize_address(authorized_backend),
            referrer_reward=require_non_negative_amount(referrer_reward),
            referee_reward=require_non_negative_amount(referee_reward),
        )

        self.logger.info(
            "Program settings bootstrapped",
            extra={
                "owner": program.owner,
                "authorized_backend": program.authorized_backend,
            },
        )
        return program

    async def _require_owner(self, caller: str) -> ProgramSettings:
        caller = normalize_address(caller)
        program = await self.settings_repo.get_current(for_update=True)
        if caller != program.owner:
            raise Unauthorized(f"{caller} is not the owner")
        return program

    @transaction
    async def set_authorized_backend(
        self, caller: str, backend: str, now: int
    ) -> ProgramSettings:
        """
        Reassign the authorized backend identity.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidAddress: If backend is empty, zero or malformed
        """
        program = await self._require_owner(caller)
        backend = normalize_address(backend)

        previous = program.authorized_backend
        program.authorized_backend = backend
        await self.session.flush()

        await self.events.record(
            EventType.AUTHORIZED_BACKEND_UPDATED,
            program.owner,
            now,
            previous=previous,
            current=backend,
        )
        return program

    @transaction
    async def set_reward_amounts(
        self, caller: str, referrer_reward: int, referee_reward: int, now: int
    ) -> ProgramSettings:
        """
        Reconfigure referral bounty amounts.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidAmount: If an amount is negative or not an integer
        """
        program = await self._require_owner(caller)
        require_non_negative_amount(referrer_reward)
        require_non_negative_amount(referee_reward)

        program.referrer_reward = referrer_reward
        program.referee_reward = referee_reward
        await self.session.flush()

        await self.events.record(
            EventType.REWARD_AMOUNTS_UPDATED,
            program.owner,
            now,
            referrer_reward=referrer_reward,
            referee_reward=referee_reward,
        )
        return program

    @transaction
    async def transfer_ownership(
        self, caller: str, new_owner: str, now: int
    ) -> ProgramSettings:
        """
        Hand the owner role to another identity.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidAddress: If new_owner is empty, zero or malformed
        """
        program = await self._require_owner(caller)
        new_owner = normalize_address(new_owner)

        previous = program.owner
        program.owner = new_owner
        await self.session.flush()

        await self.events.record(
            EventType.OWNERSHIP_TRANSFERRED,
            previous,
            now,
            previous=previous,
            current=new_owner,
        )
        return program

    async def get_settings(self) -> ProgramSettings:
        """Get current program settings."""
        return await self.settings_repo.get_current()
