"""
Faculty evaluation report model.
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from database import Base
from models.timestamps import utcnow, isoformat

REPORT_TYPES = ('thesis-evaluation', 'plagiarism-detection', 'ai-detection')
REPORT_STATUSES = ('draft', 'saved', 'sent')


class Report(Base):
    """Evaluation report written by a faculty member about one thesis version."""
    __tablename__ = 'reports'

    id = Column(Integer, primary_key=True)
    report_id = Column(String(100), unique=True, nullable=False)
    student_id = Column(String(100), nullable=False, index=True)
    student_name = Column(String(500), nullable=False)
    faculty_id = Column(String(100), nullable=False, index=True)
    thesis_id = Column(String(100), nullable=False)
    thesis_version = Column(Integer, default=1)
    thesis_title = Column(String(1000))
    report_type = Column(String(50), nullable=False)
    report_data = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), default='draft', nullable=False)
    sent_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Report {self.report_id}: {self.report_type} ({self.status})>'

    def to_dict(self):
        return {
            'id': self.id,
            'reportId': self.report_id,
            'studentId': self.student_id,
            'studentName': self.student_name,
            'facultyId': self.faculty_id,
            'thesisId': self.thesis_id,
            'thesisVersion': self.thesis_version,
            'thesisTitle': self.thesis_title,
            'reportType': self.report_type,
            'reportData': self.report_data,
            'status': self.status,
            'sentAt': isoformat(self.sent_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }
