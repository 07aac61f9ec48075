"""
Notification repository for database operations.
"""
from typing import List, Optional
from datetime import datetime
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from repositories.base_repository import BaseRepository
from models.notification import Notification
from models.timestamps import utcnow


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification entity operations."""

    not_found_message = "Notification not found"

    def __init__(self):
        """Initialize NotificationRepository."""
        super().__init__(Notification)

    def _for_recipient(
        self,
        session: Session,
        email: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> Query:
        """Query notifications addressed to an email or a user ID (either matches)."""
        query = session.query(Notification)
        clauses = []
        if email:
            clauses.append(Notification.email == email)
        if user_id:
            clauses.append(Notification.user_id == str(user_id))
        if clauses:
            query = query.filter(or_(*clauses))
        return query

    def list_notifications(
        self,
        session: Session,
        email: Optional[str] = None,
        user_id: Optional[str] = None,
        read: Optional[bool] = None,
        type: Optional[str] = None,
        limit: int = 50
    ) -> List[Notification]:
        """
        List notifications newest first.

        Args:
            session: Database session
            email: Recipient email filter
            user_id: Recipient user ID filter
            read: Read-state filter (None for all)
            type: Notification type filter
            limit: Maximum number of results

        Returns:
            List of notifications
        """
        query = self._for_recipient(session, email, user_id)
        if read is not None:
            query = query.filter(Notification.read == read)
        if type:
            query = query.filter(Notification.type == type)

        return query.order_by(
            Notification.created_at.desc(), Notification.id.desc()
        ).limit(limit).all()

    def mark_all_read(
        self,
        session: Session,
        email: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> int:
        """Mark every unread notification of a recipient as read; returns the count."""
        query = self._for_recipient(session, email, user_id).filter(Notification.read.is_(False))
        modified = query.update(
            {Notification.read: True, Notification.read_at: utcnow()},
            synchronize_session=False
        )
        session.flush()
        return modified

    def count_for_recipient(
        self,
        session: Session,
        email: Optional[str] = None,
        user_id: Optional[str] = None,
        unread_only: bool = False
    ) -> int:
        query = self._for_recipient(session, email, user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return query.count()

    def get_due_undelivered(
        self,
        session: Session,
        email: str,
        now: Optional[datetime] = None
    ) -> List[Notification]:
        """Notifications for an email that are due and not yet delivered, oldest first."""
        now = now or utcnow()
        return session.query(Notification).filter(
            Notification.email == email,
            Notification.scheduled_at <= now,
            Notification.delivered.is_(False)
        ).order_by(Notification.scheduled_at.asc()).all()
