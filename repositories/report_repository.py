"""
Evaluation report repository for database operations.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.report import Report


class ReportRepository(BaseRepository[Report]):
    """Repository for Report entity operations."""

    not_found_message = "Report not found"

    def __init__(self):
        """Initialize ReportRepository."""
        super().__init__(Report)

    def get_by_report_id(self, session: Session, report_id: str) -> Optional[Report]:
        return session.query(Report).filter_by(report_id=report_id).first()

    def list_sent_for_student(self, session: Session, student_id: str) -> List[Report]:
        """Reports already delivered to a student, newest first."""
        return session.query(Report).filter_by(
            student_id=student_id, status='sent'
        ).order_by(Report.sent_at.desc(), Report.created_at.desc()).all()

    def list_for_faculty(self, session: Session, faculty_id: str) -> List[Report]:
        """Every report a faculty member wrote, drafts included, newest first."""
        return session.query(Report).filter_by(faculty_id=faculty_id).order_by(
            Report.created_at.desc()
        ).all()
