"""
Thesis model: one submission artifact at a specific version of a chain.
"""
import enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from database import Base
from models.timestamps import utcnow, isoformat


class ThesisStatus(str, enum.Enum):
    """Lifecycle states of a thesis record."""
    NOT_SUBMITTED = 'Not Submitted'
    SUBMITTED = 'Submitted'
    UNDER_REVIEW = 'Under Review'
    RESUBMIT = 'Resubmit'
    APPROVED = 'Approved'
    REJECTED = 'Rejected'
    RESUBMISSION_REQUESTED = 'Resubmission Requested'
    RESUBMITTED = 'Resubmitted'


class Thesis(Base):
    """
    Model for a thesis submission.

    Every resubmission creates a new row; rows sharing an
    original_submission_id (plus the original itself) form a chain.
    """
    __tablename__ = 'theses'

    id = Column(Integer, primary_key=True)
    student_name = Column(String(500), nullable=False)
    student_id = Column(String(100), nullable=False, index=True)
    file_url = Column(String(2000), nullable=False)
    department = Column(String(255), nullable=False)
    supervisor_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    status = Column(String(50), default=ThesisStatus.NOT_SUBMITTED.value, nullable=False)

    # Versioning
    is_resubmission = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, default=1, nullable=False)
    parent_thesis_id = Column(Integer, ForeignKey('theses.id'), index=True)
    original_submission_id = Column(Integer, ForeignKey('theses.id'), index=True)

    # Resubmission request
    resubmission_requested = Column(Boolean, default=False, nullable=False)
    resubmission_requested_at = Column(DateTime)
    resubmission_requested_by = Column(Integer, ForeignKey('users.id'))
    resubmission_reason = Column(Text)

    # Append-only list of {version, submittedAt, fileUrl, status}
    submission_history = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    supervisor = relationship('User', foreign_keys=[supervisor_id])

    def __repr__(self):
        return f'<Thesis {self.id}: {self.student_id} v{self.version}>'

    @property
    def chain_root_id(self) -> int:
        """Id of the first version in this record's chain."""
        return self.original_submission_id or self.id

    def snapshot(self):
        """History entry describing this record as it stands now."""
        return {
            'version': self.version,
            'submittedAt': isoformat(self.created_at),
            'fileUrl': self.file_url,
            'status': self.status
        }

    def to_dict(self):
        """Convert thesis to dictionary for API responses."""
        return {
            'id': self.id,
            'studentName': self.student_name,
            'studentId': self.student_id,
            'fileUrl': self.file_url,
            'department': self.department,
            'supervisorId': self.supervisor_id,
            'status': self.status,
            'isResubmission': self.is_resubmission,
            'version': self.version,
            'parentThesisId': self.parent_thesis_id,
            'originalSubmissionId': self.original_submission_id,
            'resubmissionRequested': self.resubmission_requested,
            'resubmissionRequestedAt': isoformat(self.resubmission_requested_at),
            'resubmissionRequestedBy': self.resubmission_requested_by,
            'resubmissionReason': self.resubmission_reason,
            'submissionHistory': list(self.submission_history or []),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }


class ThesisChain(Base):
    """Per-chain version counter; rows are only ever incremented in place."""
    __tablename__ = 'thesis_chains'

    chain_root_id = Column(Integer, ForeignKey('theses.id'), primary_key=True)
    last_version = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<ThesisChain {self.chain_root_id}: v{self.last_version}>'
