"""
Thesis service: submissions, resubmission requests and version chains.
"""
import logging
from typing import Dict, Any, List, Optional
from injector import inject

import config.settings as settings
from database.connection import get_db_session
from models.thesis import Thesis, ThesisStatus
from models.timestamps import utcnow, isoformat
from repositories.thesis_repository import ThesisRepository, ThesisChainRepository
from services.exceptions import (
    InvalidInputError, InvalidStateError, ForbiddenError, ConflictError, NotFoundError
)
from services.notification_service import NotificationService
from services.user_service import UserService

logger = logging.getLogger(__name__)


def student_ids_match(submitted: str, recorded: str) -> bool:
    """
    Lenient student identity check used to authorise resubmissions.

    Matches on case-insensitive equality or when either value contains the
    other, so "s123" matches "S123" and "s123@uni.edu".
    """
    a = str(submitted or '').strip().lower()
    b = str(recorded or '').strip().lower()
    if not a or not b:
        return False
    return a == b or a in b or b in a


def _required(data: Dict[str, Any], *fields: str) -> Dict[str, str]:
    """Pull non-empty fields out of a payload as strings or raise InvalidInputError."""
    values = {}
    missing = []
    for field in fields:
        value = data.get(field)
        text = '' if value is None else str(value).strip()
        if not text:
            missing.append(field)
        else:
            values[field] = text
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")
    return values


class ThesisService:
    """Service for the thesis version chain."""

    @inject
    def __init__(
        self,
        thesis_repository: ThesisRepository,
        chain_repository: ThesisChainRepository,
        user_service: UserService,
        notification_service: NotificationService
    ):
        """Initialize thesis service."""
        self.thesis_repository = thesis_repository
        self.chain_repository = chain_repository
        self.user_service = user_service
        self.notification_service = notification_service

    def submit_initial(self, data: Dict[str, Any]) -> Thesis:
        """
        Create the first version of a student's thesis.

        Args:
            data: studentName, studentId, department, fileUrl, supervisorId

        Returns:
            The new thesis at version 1

        Raises:
            InvalidInputError: If a field is missing
            ConflictError: If the student already has a thesis
            InvalidReferenceError: If the supervisor is not a faculty user
        """
        fields = _required(data, 'studentName', 'studentId', 'department', 'fileUrl', 'supervisorId')

        with get_db_session() as session:
            if self.thesis_repository.get_any_for_student(session, fields['studentId']):
                raise ConflictError("Thesis already submitted for this student")

            supervisor = self.user_service.resolve_supervisor(session, fields['supervisorId'])

            thesis = self.thesis_repository.create_thesis(
                session,
                student_name=fields['studentName'],
                student_id=fields['studentId'],
                department=fields['department'],
                file_url=fields['fileUrl'],
                supervisor_id=supervisor.id,
                status=ThesisStatus.UNDER_REVIEW.value
            )

        logger.info(f"Thesis {thesis.id} submitted by student {thesis.student_id}")
        return thesis

    def request_resubmission(self, thesis_id, reason: str, faculty_id) -> Thesis:
        """
        Ask the student to submit a new version.

        Re-requesting on a thesis that already carries an open request
        re-stamps the request fields.

        Raises:
            InvalidInputError: If thesis, reason or faculty is missing
            NotFoundError: If the thesis does not exist
            ForbiddenError: If the faculty member is not the supervisor
            InvalidStateError: If another version of the student's thesis
                already has an open request
        """
        if thesis_id is None or not str(thesis_id).strip():
            raise InvalidInputError("Thesis ID is required")
        if not reason or not str(reason).strip():
            raise InvalidInputError("Reason is required")
        if faculty_id is None or not str(faculty_id).strip():
            raise InvalidInputError("Faculty ID is required")

        with get_db_session() as session:
            thesis = self.thesis_repository.require(session, thesis_id)

            if str(thesis.supervisor_id) != str(faculty_id).strip():
                raise ForbiddenError("Not authorized to request resubmission for this thesis")

            open_request = self.thesis_repository.get_requested_for_student(session, thesis.student_id)
            if open_request and open_request.id != thesis.id:
                raise InvalidStateError(
                    f"Thesis {open_request.id} already has an open resubmission request"
                )

            previous_status = thesis.status
            self.thesis_repository.update(
                session,
                thesis,
                status=ThesisStatus.RESUBMIT.value,
                resubmission_requested=True,
                resubmission_requested_at=utcnow(),
                resubmission_requested_by=thesis.supervisor_id,
                resubmission_reason=str(reason).strip(),
                updated_at=utcnow()
            )

            student = self.user_service.find_user_by_student_id(session, thesis.student_id)
            recipient = {
                'email': student.email if student else thesis.student_id,
                'user_id': student.id if student else thesis.student_id
            }
            supervisor_name = thesis.supervisor.full_name if thesis.supervisor else None

        logger.info(f"Resubmission requested for thesis {thesis.id} by faculty {faculty_id}")

        self.notification_service.notify(
            type='resubmission_request',
            title='Thesis Resubmission Required',
            message=f"Your supervisor has requested a resubmission of your thesis. Reason: {thesis.resubmission_reason}",
            priority='high',
            related_thesis_id=thesis.id,
            action_url=f"{settings.CLIENT_URL}/thesis-resubmission",
            action_label='Submit Revised Thesis',
            metadata={'supervisorName': supervisor_name, 'previousStatus': previous_status},
            **recipient
        )
        return thesis

    def submit_resubmission(self, data: Dict[str, Any]) -> Thesis:
        """
        Create the next version of a thesis chain.

        The version number comes from the chain counter, raised to at least
        the highest version already stored in the chain, so it is unique
        even when branches were created out of band.

        Args:
            data: originalThesisId, studentId, fileUrl and optional
                studentName / department overrides

        Returns:
            The new thesis version

        Raises:
            InvalidInputError: If a field is missing
            NotFoundError: If the referenced thesis does not exist
            ForbiddenError: If the student does not own the thesis
            InvalidStateError: If no resubmission was requested
        """
        fields = _required(data, 'originalThesisId', 'studentId', 'fileUrl')

        with get_db_session() as session:
            parent = self.thesis_repository.require(session, fields['originalThesisId'])

            if not student_ids_match(fields['studentId'], parent.student_id):
                logger.warning(
                    f"Student {fields['studentId']} attempted to resubmit thesis {parent.id} "
                    f"owned by {parent.student_id}"
                )
                raise ForbiddenError("Not authorized to resubmit this thesis")

            if not parent.resubmission_requested:
                raise InvalidStateError("No resubmission has been requested for this thesis")

            chain_root_id = parent.chain_root_id
            related = self.thesis_repository.find_versions_after(session, parent.id, chain_root_id)
            highest_version = max([parent.version] + [t.version for t in related])

            version = self.chain_repository.allocate_next_version(session, chain_root_id, highest_version)

            history = list(parent.submission_history or [])
            history.append(parent.snapshot())

            thesis = self.thesis_repository.create_thesis(
                session,
                student_name=str(data.get('studentName') or '').strip() or parent.student_name,
                student_id=fields['studentId'],
                department=str(data.get('department') or '').strip() or parent.department,
                file_url=fields['fileUrl'],
                supervisor_id=parent.supervisor_id,
                status=ThesisStatus.UNDER_REVIEW.value,
                version=version,
                is_resubmission=True,
                parent_thesis_id=parent.id,
                original_submission_id=chain_root_id,
                submission_history=history
            )

            self.thesis_repository.update(
                session,
                parent,
                status=ThesisStatus.RESUBMITTED.value,
                resubmission_requested=False,
                updated_at=utcnow()
            )

            supervisor = parent.supervisor
            recipient = {
                'email': supervisor.email if supervisor else None,
                'user_id': supervisor.id if supervisor else None
            }

        logger.info(f"Thesis {parent.id} resubmitted as thesis {thesis.id} (v{thesis.version})")

        if recipient['email']:
            self.notification_service.notify(
                type='resubmission_received',
                title='Revised Thesis Submitted',
                message=f"Student {thesis.student_name} has submitted a revised thesis (Version {thesis.version}).",
                priority='medium',
                related_thesis_id=thesis.id,
                action_url=f"{settings.CLIENT_URL}/faculty-thesis-review",
                action_label='Review Thesis',
                metadata={
                    'studentName': thesis.student_name,
                    'version': thesis.version,
                    'previousVersion': parent.version
                },
                **recipient
            )
        return thesis

    def get_version_history(self, thesis_id) -> Dict[str, Any]:
        """
        Get every version in the chain of a thesis.

        Returns:
            Dictionary with originalThesisId, currentVersion (the requested
            record's version), totalVersions and versions newest first
        """
        with get_db_session() as session:
            thesis = self.thesis_repository.require(session, thesis_id)
            chain_root_id = thesis.chain_root_id
            versions = self.thesis_repository.get_chain(session, chain_root_id)

            return {
                'originalThesisId': chain_root_id,
                'currentVersion': thesis.version,
                'totalVersions': len(versions),
                'versions': [version.to_dict() for version in versions]
            }

    def get_status_history(self, thesis_id) -> List[Dict[str, Any]]:
        """
        Status timeline of a thesis, newest first.

        Built from the snapshots of earlier versions plus the record's
        current state.
        """
        with get_db_session() as session:
            thesis = self.thesis_repository.require(session, thesis_id)

            history = [
                {
                    'version': entry.get('version'),
                    'status': entry.get('status'),
                    'timestamp': entry.get('submittedAt'),
                    'fileUrl': entry.get('fileUrl'),
                    'comments': None
                }
                for entry in (thesis.submission_history or [])
            ]
            history.append({
                'version': thesis.version,
                'status': thesis.status,
                'timestamp': isoformat(thesis.updated_at or thesis.created_at),
                'fileUrl': thesis.file_url,
                'comments': thesis.resubmission_reason if thesis.resubmission_requested else None
            })

        history.reverse()
        return history

    def approve_via_report_delivery(self, student_id: str) -> Optional[Thesis]:
        """
        Approve the latest thesis of a student once their evaluation report is sent.

        Returns:
            The approved thesis, or None when the student has no thesis
        """
        with get_db_session() as session:
            thesis = self.thesis_repository.get_latest_for_student(session, student_id)
            if not thesis:
                logger.warning(f"No thesis found to approve for student {student_id}")
                return None

            self.thesis_repository.update(
                session,
                thesis,
                status=ThesisStatus.APPROVED.value,
                resubmission_requested=False,
                updated_at=utcnow()
            )

        logger.info(f"Thesis {thesis.id} (v{thesis.version}) approved for student {student_id}")
        return thesis

    def list_theses(self) -> List[Thesis]:
        with get_db_session() as session:
            return self.thesis_repository.list_all(session)

    def get_thesis(self, thesis_id) -> Thesis:
        with get_db_session() as session:
            return self.thesis_repository.require(session, thesis_id)

    def get_latest_for_student(self, student_id: str) -> Thesis:
        with get_db_session() as session:
            thesis = self.thesis_repository.get_latest_for_student(session, student_id)
            if not thesis:
                raise NotFoundError("No thesis found for this student")
            return thesis

    def list_by_supervisor(self, supervisor_id) -> List[Thesis]:
        with get_db_session() as session:
            return self.thesis_repository.list_by_supervisor(session, supervisor_id)

    def get_resubmission_status(self, student_id: str) -> Dict[str, Any]:
        """Report whether a student currently has an open resubmission request."""
        with get_db_session() as session:
            thesis = self.thesis_repository.get_requested_for_student(session, student_id)
            if not thesis:
                return {'resubmissionRequested': False}

            return {
                'resubmissionRequested': True,
                'thesis': {
                    'id': thesis.id,
                    'reason': thesis.resubmission_reason,
                    'requestedAt': isoformat(thesis.resubmission_requested_at),
                    'supervisor': thesis.supervisor.to_summary() if thesis.supervisor else None,
                    'version': thesis.version,
                    'studentId': thesis.student_id,
                    'studentName': thesis.student_name
                }
            }
