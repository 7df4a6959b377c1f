"""Event repository implementation."""

import logging
from typing import List

from sqlalchemy.orm import Session, selectinload

from ..errors import NotFound
from ..models import Event
from .base import BaseRepository

logger = logging.getLogger(__name__)


class EventRepository(BaseRepository[Event]):

    def __init__(self, db_session: Session):
        super().__init__(db_session, Event)

    def get_active_or_404(self, event_id: int) -> Event:
        """Get a non-deleted event or raise NotFound."""
        event = (
            self.db.query(Event)
            .options(selectinload(Event.attendees))
            .filter(Event.id == event_id, Event.deleted.is_(False))
            .first()
        )
        if event is None:
            raise NotFound(f"Event with id {event_id} not found")
        return event

    def list_active(self) -> List[Event]:
        return (
            self.db.query(Event)
            .options(selectinload(Event.attendees))
            .filter(Event.deleted.is_(False))
            .order_by(Event.id)
            .all()
        )

    def soft_delete(self, event: Event) -> None:
        event.deleted = True
        self.db.commit()
        logger.info(f"Soft deleted event {event.id}")
