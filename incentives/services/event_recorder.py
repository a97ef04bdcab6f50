"""
Event recorder.

Appends observable events to the ledger event log and mirrors them to the
application log. Events are for auditing and indexing; nothing reads them
for control flow.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from incentives.models.enums import EventType
from incentives.models.ledger_event import LedgerEvent
from incentives.repositories.event_repository import EventRepository
from incentives.services.base_service import BaseService


class EventRecorder(BaseService):
    """Append-only writer for ledger events."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize event recorder."""
        super().__init__(session)
        self.event_repo = EventRepository(session)

    async def record(
        self,
        event_type: EventType,
        actor: str,
        timestamp: int,
        **payload: Any,
    ) -> LedgerEvent:
        """
        Record an event.

        Args:
            event_type: Event type
            actor: Acting identity
            timestamp: Ledger clock (unix seconds)
            **payload: JSON-serializable event fields

        Returns:
            Created event
        """
        event = await self.event_repo.create(
            event_type=event_type.value,
            actor=actor,
            timestamp=timestamp,
            payload=payload,
        )

        self.logger.info(
            f"Event {event_type.value}",
            extra={"actor": actor, "timestamp": timestamp, **payload},
        )

        return event
