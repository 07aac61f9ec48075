"""
Event service: calendar entries and their announcement notifications.
"""
import logging
from typing import Dict, Any, List, Optional
from injector import inject

import config.settings as settings
from database.connection import get_db_session
from models.event import Event, EventType
from models.timestamps import utcnow, parse_datetime
from repositories.event_repository import EventRepository
from services.exceptions import InvalidInputError
from services.notification_service import NotificationService
from services.user_service import UserService

logger = logging.getLogger(__name__)


def _event_type(value: Optional[str]) -> str:
    """Canonical event type; accepts any casing of a known type."""
    if not value:
        return EventType.GENERAL.value
    for member in EventType:
        if member.value.lower() == str(value).strip().lower():
            return member.value
    raise InvalidInputError(f"Unknown event type: {value}")


def _date(data: Dict[str, Any], key: str):
    try:
        return parse_datetime(data.get(key))
    except ValueError:
        raise InvalidInputError(f"{key} must be a date or ISO-8601 timestamp")


class EventService:
    """Service for calendar events."""

    @inject
    def __init__(
        self,
        event_repository: EventRepository,
        user_service: UserService,
        notification_service: NotificationService
    ):
        """Initialize event service."""
        self.event_repository = event_repository
        self.user_service = user_service
        self.notification_service = notification_service

    def list_events(self) -> List[Event]:
        with get_db_session() as session:
            return self.event_repository.list_events(session)

    def get_event(self, event_id) -> Event:
        with get_db_session() as session:
            return self.event_repository.require(session, event_id)

    def create_event(self, data: Dict[str, Any]) -> Event:
        """
        Create an event and announce it to students and faculty.

        Args:
            data: name and endDate required; type, startDate, description optional

        Returns:
            The created event

        Raises:
            InvalidInputError: If name or endDate is missing or malformed
        """
        name = (data.get('name') or '').strip()
        if not name or not data.get('endDate'):
            raise InvalidInputError("name and endDate are required")

        end_date = _date(data, 'endDate')
        start_date = _date(data, 'startDate')
        event_type = _event_type(data.get('type'))

        with get_db_session() as session:
            now = utcnow()
            event = self.event_repository.create(
                session,
                name=name,
                type=event_type,
                start_date=start_date,
                end_date=end_date,
                description=data.get('description'),
                thesis_folder_created=False,
                created_at=now,
                updated_at=now
            )

        logger.info(f"Event {event.id} created: {event.name} ({event.type})")

        self._announce(event)
        return event

    def _announce(self, event: Event) -> int:
        """Send a general notification about a new event; returns how many were stored."""
        try:
            recipients = self.user_service.list_notification_recipients()
        except Exception as e:
            logger.error(f"Could not load recipients for event {event.id}: {e}")
            return 0

        if not recipients:
            logger.warning(f"No students or faculty to notify about event {event.id}")
            return 0

        message = f'A new event "{event.name}" has been added with due date {event.end_date:%Y-%m-%d}'
        sent = 0
        for user in recipients:
            notification = self.notification_service.notify(
                email=user.email,
                user_id=user.student_id or user.email,
                type='general',
                title='New Event Added',
                message=message,
                priority='medium',
                action_url=f"{settings.CLIENT_URL}/events",
                action_label='View Events',
                metadata={'eventId': event.id}
            )
            if notification:
                sent += 1

        logger.info(f"Event {event.id} announced to {sent}/{len(recipients)} users")
        return sent

    def update_event(self, event_id, data: Dict[str, Any]) -> Event:
        """
        Update the editable fields of an event.

        Raises:
            NotFoundError: If the event does not exist
            InvalidInputError: If a field is malformed
        """
        changes = {}
        if 'name' in data:
            name = (data.get('name') or '').strip()
            if not name:
                raise InvalidInputError("name cannot be empty")
            changes['name'] = name
        if 'type' in data:
            changes['type'] = _event_type(data.get('type'))
        if 'startDate' in data:
            changes['start_date'] = _date(data, 'startDate')
        if data.get('endDate'):
            changes['end_date'] = _date(data, 'endDate')
        if 'description' in data:
            changes['description'] = data.get('description')

        with get_db_session() as session:
            event = self.event_repository.require(session, event_id)
            event = self.event_repository.update(session, event, updated_at=utcnow(), **changes)

        logger.info(f"Event {event.id} updated: {', '.join(sorted(changes)) or 'no changes'}")
        return event

    def delete_event(self, event_id) -> None:
        with get_db_session() as session:
            event = self.event_repository.require(session, event_id)
            self.event_repository.delete(session, event)

        logger.info(f"Event {event_id} deleted")
