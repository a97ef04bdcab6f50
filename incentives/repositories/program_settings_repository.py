"""
Program settings repository.

Data access layer for the single ProgramSettings row.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.program_settings import PROGRAM_SETTINGS_ID, ProgramSettings
from incentives.repositories.base import BaseRepository
from incentives.utils.exceptions import ConfigurationError


class ProgramSettingsRepository(BaseRepository[ProgramSettings]):
    """Program settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize program settings repository."""
        super().__init__(ProgramSettings, session)

    async def get_current(self, for_update: bool = False) -> ProgramSettings:
        """
        Get the program settings row.

        Args:
            for_update: Lock the row for the rest of the transaction

        Returns:
            Program settings

        Raises:
            ConfigurationError: If the ledger was never bootstrapped
        """
        if for_update:
            current = await self.get_for_update(PROGRAM_SETTINGS_ID)
        else:
            current = await self.get_by_id(PROGRAM_SETTINGS_ID)

        if current is None:
            raise ConfigurationError(
                "Program settings missing; bootstrap the ledger first"
            )
        return current
