"""
Event repository for database operations.
"""
from typing import List
from datetime import datetime
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.event import Event, THESIS_EVENT_TYPES


class EventRepository(BaseRepository[Event]):
    """Repository for Event entity operations."""

    not_found_message = "Event not found"

    def __init__(self):
        """Initialize EventRepository."""
        super().__init__(Event)

    def list_events(self, session: Session) -> List[Event]:
        """Events by due date ascending, most recently created first on ties."""
        return session.query(Event).order_by(
            Event.end_date.asc(), Event.created_at.desc()
        ).all()

    def find_needing_folders(
        self,
        session: Session,
        window_start: datetime,
        window_end: datetime
    ) -> List[Event]:
        """
        Thesis events due inside a window that have no folder yet.

        Args:
            session: Database session
            window_start: Earliest due date (inclusive)
            window_end: Latest due date (inclusive)

        Returns:
            Matching events
        """
        return session.query(Event).filter(
            Event.type.in_(THESIS_EVENT_TYPES),
            Event.end_date >= window_start,
            Event.end_date <= window_end,
            Event.thesis_folder_created.is_(False)
        ).order_by(Event.end_date.asc()).all()
