"""
Evaluation report service.
"""
import logging
import time
import uuid
from typing import Dict, Any, List
from injector import inject

from database.connection import get_db_session
from models.report import Report, REPORT_TYPES
from models.timestamps import utcnow
from repositories.report_repository import ReportRepository
from services.exceptions import InvalidInputError
from services.thesis_service import ThesisService

logger = logging.getLogger(__name__)


class ReportService:
    """Service for faculty evaluation reports."""

    @inject
    def __init__(self, report_repository: ReportRepository, thesis_service: ThesisService):
        """Initialize report service."""
        self.report_repository = report_repository
        self.thesis_service = thesis_service

    def save_draft_report(self, data: Dict[str, Any]) -> Report:
        """
        Save a report as a draft; it is not visible to the student yet.

        Args:
            data: studentId, studentName, facultyId and reportType required;
                thesisId, thesisVersion, thesisTitle and reportData optional

        Returns:
            The stored report

        Raises:
            InvalidInputError: If a field is missing or the type is unknown
        """
        missing = [
            field for field in ('studentId', 'studentName', 'facultyId', 'reportType')
            if not str(data.get(field) or '').strip()
        ]
        if missing:
            raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")

        report_type = str(data['reportType']).strip()
        if report_type not in REPORT_TYPES:
            raise InvalidInputError(f"Invalid report type. Must be one of: {', '.join(REPORT_TYPES)}")

        report_data = data.get('reportData') or {}
        if not isinstance(report_data, dict):
            raise InvalidInputError("reportData must be an object")

        try:
            thesis_version = int(data.get('thesisVersion') or 1)
        except (TypeError, ValueError):
            raise InvalidInputError("thesisVersion must be an integer")

        report_id = f"report_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

        with get_db_session() as session:
            now = utcnow()
            report = self.report_repository.create(
                session,
                report_id=report_id,
                student_id=str(data['studentId']).strip(),
                student_name=str(data['studentName']).strip(),
                faculty_id=str(data['facultyId']).strip(),
                thesis_id=str(data.get('thesisId') or report_id),
                thesis_version=thesis_version,
                thesis_title=(data.get('thesisTitle') or 'Thesis Document').strip(),
                report_type=report_type,
                report_data=report_data,
                status='draft',
                created_at=now,
                updated_at=now
            )

        logger.info(f"Report {report.report_id} ({report.report_type}) saved as draft for {report.student_id}")
        return report

    def send_report_to_student(self, report_id) -> Dict[str, Any]:
        """
        Deliver a report to its student.

        Sending a thesis evaluation approves the student's latest thesis.

        Returns:
            Dictionary with the report and the approved thesis, if any

        Raises:
            NotFoundError: If the report does not exist
        """
        with get_db_session() as session:
            report = self.report_repository.require(session, report_id)
            now = utcnow()
            report = self.report_repository.update(
                session, report, status='sent', sent_at=now, updated_at=now
            )

        logger.info(f"Report {report.report_id} sent to student {report.student_id}")

        thesis = None
        if report.report_type == 'thesis-evaluation':
            thesis = self.thesis_service.approve_via_report_delivery(report.student_id)

        return {'report': report, 'thesis': thesis}

    def get_report(self, report_id) -> Report:
        with get_db_session() as session:
            return self.report_repository.require(session, report_id)

    def delete_report(self, report_id) -> None:
        """
        Delete a report, draft or sent.

        Raises:
            NotFoundError: If the report does not exist
        """
        with get_db_session() as session:
            report = self.report_repository.require(session, report_id)
            self.report_repository.delete(session, report)

        logger.info(f"Report {report_id} deleted")

    def list_reports_for_student(self, student_id: str) -> List[Report]:
        if not student_id:
            raise InvalidInputError("Student ID is required")

        with get_db_session() as session:
            return self.report_repository.list_sent_for_student(session, student_id)

    def list_reports_for_faculty(self, faculty_id: str) -> List[Report]:
        if not faculty_id:
            raise InvalidInputError("Faculty ID is required")

        with get_db_session() as session:
            return self.report_repository.list_for_faculty(session, str(faculty_id))
