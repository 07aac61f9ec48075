"""
Calendar event model, including thesis folder provisioning metadata.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from database import Base
from models.timestamps import utcnow, isoformat


class EventType(str, enum.Enum):
    THESIS_SUBMISSION = 'Thesis Submission'
    THESIS_RESUBMISSION = 'Thesis Resubmission'
    GENERAL = 'General'
    MEETING = 'Meeting'
    WORKSHOP = 'Workshop'
    DEADLINE = 'Deadline'


THESIS_EVENT_TYPES = (EventType.THESIS_SUBMISSION.value, EventType.THESIS_RESUBMISSION.value)


class Event(Base):
    """Model for calendar events created by administrators."""
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True)
    name = Column(String(500), nullable=False)
    type = Column(String(50), nullable=False, default=EventType.GENERAL.value, index=True)
    start_date = Column(DateTime)
    end_date = Column(DateTime, nullable=False, index=True)
    description = Column(Text)

    # Thesis folder management
    thesis_folder_created = Column(Boolean, default=False, nullable=False, index=True)
    thesis_folder_path = Column(String(1000))
    thesis_folder_url = Column(String(2000))
    folder_created_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Event {self.id}: {self.name}>'

    @property
    def is_thesis_event(self) -> bool:
        return self.type in THESIS_EVENT_TYPES

    def to_dict(self):
        """Convert event to dictionary for API responses; dueDate mirrors endDate."""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'startDate': isoformat(self.start_date),
            'endDate': isoformat(self.end_date),
            'dueDate': isoformat(self.end_date),
            'description': self.description,
            'thesisFolderCreated': self.thesis_folder_created,
            'thesisFolderPath': self.thesis_folder_path,
            'thesisFolderUrl': self.thesis_folder_url,
            'folderCreatedAt': isoformat(self.folder_created_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }
