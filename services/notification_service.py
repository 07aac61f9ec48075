"""
Notification service: persists notifications and enqueues their emails.
"""
import logging
from typing import Any, Dict, List, Optional
from injector import inject

from database.connection import get_db_session
from models.notification import Notification, PRIORITIES
from models.timestamps import utcnow, parse_datetime
from repositories.notification_repository import NotificationRepository
from services.exceptions import InvalidInputError
from services.kafka_service import KafkaService

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for notification records.

    Delivery is a two-step protocol: the record is committed in its own
    transaction, then an email task is published to Kafka. Callers invoke
    notify() only after their own state change has committed, so a failure
    here can never roll that change back.
    """

    @inject
    def __init__(
        self,
        kafka_service: KafkaService,
        notification_repository: NotificationRepository
    ):
        """Initialize notification service."""
        self.kafka_service = kafka_service
        self.notification_repository = notification_repository

    def notify(
        self,
        email: str,
        message: str,
        type: str = 'general',
        title: Optional[str] = None,
        user_id: Optional[str] = None,
        priority: str = 'medium',
        related_thesis_id: Optional[int] = None,
        action_url: Optional[str] = None,
        action_label: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Optional[Notification]:
        """
        Best-effort notification for a committed state change.

        Returns:
            The stored notification, or None if it could not be stored
        """
        try:
            notification = self._store(
                email=email,
                user_id=str(user_id) if user_id is not None else None,
                type=type,
                title=title,
                message=message,
                scheduled_at=utcnow(),
                priority=priority,
                related_thesis_id=related_thesis_id,
                action_url=action_url,
                action_label=action_label,
                extra_metadata=metadata or {}
            )
        except Exception as e:
            logger.error(f"Failed to store {type} notification for {email}: {e}")
            return None

        self._enqueue_email(notification)
        return notification

    def create_notification(self, data: Dict[str, Any]) -> Notification:
        """
        Create a notification from an API payload.

        Args:
            data: camelCase payload; email, message and scheduledAt are required

        Returns:
            The stored notification

        Raises:
            InvalidInputError: If required fields are missing or malformed
        """
        email = (data.get('email') or '').strip()
        message = (data.get('message') or '').strip()
        if not email or not message or not data.get('scheduledAt'):
            raise InvalidInputError("email, message, scheduledAt required")

        try:
            scheduled_at = parse_datetime(data['scheduledAt'])
        except ValueError:
            raise InvalidInputError("scheduledAt must be an ISO-8601 timestamp")

        priority = data.get('priority') or 'medium'
        if priority not in PRIORITIES:
            raise InvalidInputError(f"priority must be one of {', '.join(PRIORITIES)}")

        user_id = data.get('userId')
        notification = self._store(
            email=email,
            user_id=str(user_id) if user_id is not None else None,
            type=data.get('type') or 'general',
            title=data.get('title'),
            message=message,
            scheduled_at=scheduled_at,
            priority=priority,
            related_thesis_id=data.get('relatedThesisId'),
            action_url=data.get('actionUrl'),
            action_label=data.get('actionLabel'),
            extra_metadata=data.get('metadata') or {}
        )
        self._enqueue_email(notification)
        return notification

    def _store(self, **fields) -> Notification:
        with get_db_session() as session:
            notification = self.notification_repository.create(
                session, read=False, delivered=False, created_at=utcnow(), **fields
            )
        logger.info(f"Notification {notification.id} ({notification.type}) stored for {notification.email}")
        return notification

    def _enqueue_email(self, notification: Notification) -> bool:
        """Publish the email task; failures are logged and reported as False."""
        try:
            queued = self.kafka_service.publish_notification_email(
                notification_id=notification.id,
                email=notification.email,
                title=notification.title,
                message=notification.message,
                priority=notification.priority,
                action_url=notification.action_url,
                action_label=notification.action_label
            )
        except Exception as e:
            logger.error(f"Failed to enqueue email for notification {notification.id}: {e}")
            return False

        if not queued:
            logger.warning(f"Email for notification {notification.id} was not queued")
        return queued

    def list_notifications(
        self,
        email: Optional[str] = None,
        user_id: Optional[str] = None,
        status: str = 'all',
        type: Optional[str] = None,
        limit: int = 50
    ) -> List[Notification]:
        """
        List notifications newest first.

        Args:
            email: Recipient email filter
            user_id: Recipient user ID filter
            status: all, read or unread
            type: Notification type filter
            limit: Maximum number of results
        """
        read = {'read': True, 'unread': False}.get(status)
        with get_db_session() as session:
            return self.notification_repository.list_notifications(
                session, email=email, user_id=user_id, read=read, type=type, limit=limit
            )

    def mark_read(self, notification_id: int) -> Notification:
        with get_db_session() as session:
            notification = self.notification_repository.require(session, notification_id)
            if not notification.read:
                notification.read = True
                notification.read_at = utcnow()
                session.flush()
            return notification

    def mark_all_read(self, user_id: Optional[str] = None, email: Optional[str] = None) -> int:
        """Mark every unread notification of a recipient as read; returns the count."""
        if not user_id and not email:
            raise InvalidInputError("userId or email required")

        with get_db_session() as session:
            modified = self.notification_repository.mark_all_read(session, email=email, user_id=user_id)

        logger.info(f"{modified} notifications marked as read for {email or user_id}")
        return modified

    def delete_notification(self, notification_id: int) -> None:
        with get_db_session() as session:
            notification = self.notification_repository.require(session, notification_id)
            self.notification_repository.delete(session, notification)

    def get_counts(self, user_id: Optional[str] = None, email: Optional[str] = None) -> Dict[str, int]:
        if not user_id and not email:
            raise InvalidInputError("userId or email required")

        with get_db_session() as session:
            return {
                'totalCount': self.notification_repository.count_for_recipient(
                    session, email=email, user_id=user_id
                ),
                'unreadCount': self.notification_repository.count_for_recipient(
                    session, email=email, user_id=user_id, unread_only=True
                )
            }

    def get_due_undelivered(self, email: str) -> List[Notification]:
        if not email:
            raise InvalidInputError("email required")

        with get_db_session() as session:
            return self.notification_repository.get_due_undelivered(session, email)

    def mark_delivered(self, notification_id: int) -> Notification:
        with get_db_session() as session:
            notification = self.notification_repository.require(session, notification_id)
            notification.delivered = True
            session.flush()
            return notification
