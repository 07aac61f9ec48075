"""
Repositories for folder schedules and provisioned thesis folders.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.thesis_folder import FolderSchedule, ThesisFolder
from models.timestamps import utcnow


class FolderScheduleRepository(BaseRepository[FolderSchedule]):
    """Repository for FolderSchedule entity operations."""

    def __init__(self):
        """Initialize FolderScheduleRepository."""
        super().__init__(FolderSchedule)

    def get_by_event_id(self, session: Session, event_id: int) -> Optional[FolderSchedule]:
        return session.query(FolderSchedule).filter_by(event_id=event_id).first()

    def list_ordered(self, session: Session) -> List[FolderSchedule]:
        return session.query(FolderSchedule).order_by(
            FolderSchedule.folder_creation_date.asc()
        ).all()

    def record_attempt(
        self,
        session: Session,
        event_id: int,
        status: str,
        folder_path: Optional[str] = None,
        folder_url: Optional[str] = None,
        error: Optional[str] = None
    ) -> Optional[FolderSchedule]:
        """
        Stamp the outcome of a provisioning attempt on the event's schedule.

        Args:
            session: Database session
            event_id: Event ID
            status: 'created' or 'failed'
            folder_path: Provisioned path on success
            folder_url: Provisioned URL on success
            error: Error message on failure

        Returns:
            Updated schedule or None if the event was never scheduled
        """
        schedule = self.get_by_event_id(session, event_id)

        if schedule:
            schedule.status = status
            schedule.last_attempt = utcnow()
            if folder_path:
                schedule.folder_path = folder_path
            if folder_url:
                schedule.folder_url = folder_url
            if error:
                schedule.error = error
            session.flush()

        return schedule


class ThesisFolderRepository(BaseRepository[ThesisFolder]):
    """Repository for ThesisFolder entity operations."""

    def __init__(self):
        """Initialize ThesisFolderRepository."""
        super().__init__(ThesisFolder)

    def get_by_event_id(self, session: Session, event_id: int) -> Optional[ThesisFolder]:
        return session.query(ThesisFolder).filter_by(event_id=event_id).first()
