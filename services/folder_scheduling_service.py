"""
Folder Scheduling Service: provisions storage folders ahead of thesis deadlines.
"""
import logging
import re
import threading
import time
from datetime import timedelta
from typing import Dict, Any, List, Optional, Tuple
from injector import inject
from sqlalchemy.exc import IntegrityError

import config.settings as settings
from database.connection import get_db_session
from models.thesis_folder import FolderSchedule
from models.timestamps import utcnow, ensure_utc, isoformat
from repositories.event_repository import EventRepository
from repositories.folder_repository import FolderScheduleRepository, ThesisFolderRepository
from services.exceptions import InvalidInputError
from services.s3_service import S3Service

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    """'Thesis Submission' -> 'thesis-submission'."""
    return re.sub(r'[^a-z0-9]+', '-', (value or '').lower()).strip('-')


class FolderSchedulingService:
    """
    Service for thesis folder provisioning.

    Deferred provisioning runs on daemon threading.Timer objects kept in an
    in-process side table keyed by event id. Provisioning is idempotent per
    event, so a timer firing for an event that already has a folder is a
    no-op.
    """

    @inject
    def __init__(
        self,
        s3_service: S3Service,
        event_repository: EventRepository,
        schedule_repository: FolderScheduleRepository,
        folder_repository: ThesisFolderRepository
    ):
        """Initialize folder scheduling service."""
        self.s3_service = s3_service
        self.event_repository = event_repository
        self.schedule_repository = schedule_repository
        self.folder_repository = folder_repository
        self.lead_time = timedelta(days=settings.FOLDER_LEAD_DAYS)
        self._timers: Dict[int, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule_folder_creation(self, event_id) -> Dict[str, Any]:
        """
        Schedule folder provisioning for an event.

        The folder is created FOLDER_LEAD_DAYS before the event's due date,
        or immediately if that moment has already passed.

        Args:
            event_id: Event ID

        Returns:
            Dictionary with the schedule and whether it already existed

        Raises:
            InvalidInputError: If event_id is missing
            NotFoundError: If the event does not exist
        """
        if event_id is None or str(event_id).strip() == '':
            raise InvalidInputError("Event ID is required")

        with get_db_session() as session:
            event = self.event_repository.require(session, event_id)
            if not event.end_date:
                raise InvalidInputError("Event has no due date")

            existing = self.schedule_repository.get_by_event_id(session, event.id)
            if existing:
                logger.info(f"Folder creation already scheduled for event {event.id}")
                return {
                    'message': 'Folder creation already scheduled',
                    'eventId': event.id,
                    'folderCreationDate': isoformat(existing.folder_creation_date),
                    'alreadyScheduled': True,
                    'schedule': existing.to_dict()
                }

            due_date = ensure_utc(event.end_date)
            creation_date = due_date - self.lead_time
            schedule = self.schedule_repository.create(
                session,
                event_id=event.id,
                event_name=event.name,
                event_type=event.type,
                due_date=due_date,
                folder_creation_date=creation_date,
                status='scheduled',
                created_at=utcnow()
            )
            event_id = event.id

        delay = (creation_date - utcnow()).total_seconds()
        if delay > 0:
            self._arm_timer(event_id, delay)
            logger.info(f"Folder creation for event {event_id} scheduled in {delay / 86400:.1f} days")
        else:
            logger.info(f"Folder creation date passed, creating folder immediately for event {event_id}")
            self.provision_folder(event_id)
            schedule = self.get_schedule(event_id) or schedule

        return {
            'message': 'Folder creation scheduled successfully',
            'eventId': event_id,
            'folderCreationDate': isoformat(creation_date),
            'alreadyScheduled': False,
            'schedule': schedule.to_dict()
        }

    def _arm_timer(self, event_id: int, delay: float) -> None:
        timer = threading.Timer(delay, self._run_scheduled, args=[event_id])
        timer.daemon = True
        with self._lock:
            self._timers[event_id] = timer
        timer.start()

    def _run_scheduled(self, event_id: int) -> None:
        with self._lock:
            self._timers.pop(event_id, None)
        success, result = self.provision_folder(event_id)
        if not success:
            logger.error(f"Scheduled folder creation failed for event {event_id}: {result.get('error')}")

    def pending_event_ids(self) -> List[int]:
        """Events with a timer still waiting to fire."""
        with self._lock:
            return sorted(self._timers)

    def provision_folder(self, event_id) -> Tuple[bool, Dict[str, Any]]:
        """
        Create the storage folder of a thesis event.

        Never raises; failures are recorded on the event's schedule and
        returned.

        Args:
            event_id: Event ID

        Returns:
            Tuple of (success, response_data)
        """
        try:
            with get_db_session() as session:
                event = self.event_repository.get_by_id(session, int(event_id))
                if not event:
                    return False, {'error': 'Event not found'}

                if not event.is_thesis_event:
                    error = 'Folder creation only available for thesis events'
                    self.schedule_repository.record_attempt(session, event.id, 'failed', error=error)
                    return False, {'error': error}

                existing = self.folder_repository.get_by_event_id(session, event.id)
                if existing:
                    return True, {
                        'message': 'Folders already exist for this event',
                        'folder': existing.to_dict()
                    }

                folder_path = f"{settings.FOLDER_ROOT}/{slugify(event.type)}/{event.id}"
                folder_url = self.s3_service.create_folder(folder_path)
                now = utcnow()
                due_date = ensure_utc(event.end_date)

                folder = self.folder_repository.create(
                    session,
                    event_id=event.id,
                    event_name=event.name,
                    event_type=event.type,
                    due_date=due_date,
                    folder_creation_date=due_date - self.lead_time,
                    folder_path=folder_path,
                    folder_url=folder_url,
                    virtual_folder_id=f"thesis-{event.id}-{int(time.time() * 1000)}",
                    status='created',
                    department='All Departments',
                    total_students=0,
                    submissions_received=0,
                    created_at=now
                )

                self.event_repository.update(
                    session,
                    event,
                    thesis_folder_created=True,
                    thesis_folder_path=folder_path,
                    thesis_folder_url=folder_url,
                    folder_created_at=now
                )

                self.schedule_repository.record_attempt(
                    session, event.id, 'created', folder_path=folder_path, folder_url=folder_url
                )

            logger.info(f"Thesis folder created for event {event_id}: {folder_path}")
            return True, {
                'message': 'Thesis folders created successfully',
                'folder': folder.to_dict()
            }

        except IntegrityError:
            # Another worker provisioned the same event first
            with get_db_session() as session:
                existing = self.folder_repository.get_by_event_id(session, int(event_id))
            if existing:
                return True, {
                    'message': 'Folders already exist for this event',
                    'folder': existing.to_dict()
                }
            self._record_failure(event_id, 'Conflicting folder record')
            return False, {'error': 'Failed to create thesis folders'}

        except Exception as e:
            logger.error(f"Error creating thesis folders for event {event_id}: {e}")
            self._record_failure(event_id, str(e))
            return False, {
                'error': 'Failed to create thesis folders',
                'details': str(e)
            }

    def _record_failure(self, event_id, error: str) -> None:
        try:
            with get_db_session() as session:
                self.schedule_repository.record_attempt(session, int(event_id), 'failed', error=error)
        except Exception as e:
            logger.error(f"Could not record folder failure for event {event_id}: {e}")

    def provision_due_folders(self) -> Dict[str, Any]:
        """
        Provision folders for every thesis event due within the lead time.

        Returns:
            Dictionary with a summary message and per-event results
        """
        now = utcnow()
        with get_db_session() as session:
            events = [
                (event.id, event.name)
                for event in self.event_repository.find_needing_folders(
                    session, now, now + self.lead_time
                )
            ]

        results = []
        for event_id, event_name in events:
            success, data = self.provision_folder(event_id)
            results.append({
                'eventId': event_id,
                'eventName': event_name,
                'success': success,
                'message': data.get('message') or data.get('error')
            })

        logger.info(f"Manual folder creation processed {len(events)} events")
        return {
            'message': f'Processed {len(events)} events',
            'results': results
        }

    def get_schedule(self, event_id) -> Optional[FolderSchedule]:
        with get_db_session() as session:
            return self.schedule_repository.get_by_event_id(session, int(event_id))

    def get_folder_status(self, event_id) -> Dict[str, Any]:
        """
        Folder status of an event.

        Raises:
            NotFoundError: If the event does not exist
        """
        with get_db_session() as session:
            event = self.event_repository.require(session, event_id)
            folder = self.folder_repository.get_by_event_id(session, event.id)
            schedule = self.schedule_repository.get_by_event_id(session, event.id)

            return {
                'event': {
                    'id': event.id,
                    'name': event.name,
                    'type': event.type,
                    'endDate': isoformat(event.end_date),
                    'thesisFolderCreated': bool(event.thesis_folder_created),
                    'thesisFolderPath': event.thesis_folder_path,
                    'thesisFolderUrl': event.thesis_folder_url
                },
                'folder': folder.to_dict() if folder else None,
                'schedule': schedule.to_dict() if schedule else None
            }

    def list_scheduled_folders(self) -> List[FolderSchedule]:
        with get_db_session() as session:
            return self.schedule_repository.list_ordered(session)

    def shutdown(self) -> None:
        """Cancel every timer that has not fired yet."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()

        for timer in timers:
            timer.cancel()

        if timers:
            logger.info(f"Cancelled {len(timers)} pending folder creation timers")
