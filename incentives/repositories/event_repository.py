"""
Event repository.

Data access layer for LedgerEvent model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.ledger_event import LedgerEvent
from incentives.repositories.base import BaseRepository


class EventRepository(BaseRepository[LedgerEvent]):
    """Ledger event repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize event repository."""
        super().__init__(LedgerEvent, session)

    async def get_events(
        self,
        event_type: str | None = None,
        actor: str | None = None,
        after_id: int | None = None,
        limit: int | None = None,
    ) -> list[LedgerEvent]:
        """
        Get events in emission order.

        Args:
            event_type: Optional event type filter
            actor: Optional acting identity filter
            after_id: Only events with id greater than this
            limit: Max number of results

        Returns:
            List of events ordered by id
        """
        stmt = select(LedgerEvent)
        if event_type:
            stmt = stmt.where(LedgerEvent.event_type == event_type)
        if actor:
            stmt = stmt.where(LedgerEvent.actor == actor)
        if after_id is not None:
            stmt = stmt.where(LedgerEvent.id > after_id)
        stmt = stmt.order_by(LedgerEvent.id)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
