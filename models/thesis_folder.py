"""
Thesis folder provisioning models: the schedule and the provisioned folder.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from database import Base
from models.timestamps import utcnow, isoformat


class FolderSchedule(Base):
    """Audit record of when a folder is due to be provisioned and how it went."""
    __tablename__ = 'folder_schedules'

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete='CASCADE'), unique=True, nullable=False)
    event_name = Column(String(500), nullable=False)
    event_type = Column(String(50), nullable=False)
    due_date = Column(DateTime, nullable=False)
    folder_creation_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), default='scheduled', nullable=False, index=True)  # scheduled, created, failed
    folder_path = Column(String(1000))
    folder_url = Column(String(2000))
    error = Column(Text)
    last_attempt = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<FolderSchedule event={self.event_id}: {self.status}>'

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'eventName': self.event_name,
            'eventType': self.event_type,
            'dueDate': isoformat(self.due_date),
            'folderCreationDate': isoformat(self.folder_creation_date),
            'status': self.status,
            'folderPath': self.folder_path,
            'folderUrl': self.folder_url,
            'error': self.error,
            'lastAttempt': isoformat(self.last_attempt),
            'createdAt': isoformat(self.created_at)
        }


class ThesisFolder(Base):
    """A provisioned storage folder for one thesis submission event."""
    __tablename__ = 'thesis_folders'

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete='CASCADE'), unique=True, nullable=False)
    event_name = Column(String(500), nullable=False)
    event_type = Column(String(50), nullable=False)
    due_date = Column(DateTime, nullable=False)
    folder_creation_date = Column(DateTime, nullable=False)
    folder_path = Column(String(1000))
    folder_url = Column(String(2000))
    virtual_folder_id = Column(String(255), unique=True, nullable=False)
    status = Column(String(20), default='created', nullable=False)  # scheduled, created, active, archived
    department = Column(String(255), default='All Departments')
    total_students = Column(Integer, default=0)
    submissions_received = Column(Integer, default=0)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f'<ThesisFolder {self.virtual_folder_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'eventName': self.event_name,
            'eventType': self.event_type,
            'dueDate': isoformat(self.due_date),
            'folderCreationDate': isoformat(self.folder_creation_date),
            'folderPath': self.folder_path,
            'folderUrl': self.folder_url,
            'virtualFolderId': self.virtual_folder_id,
            'status': self.status,
            'metadata': {
                'totalStudents': self.total_students,
                'submissionsReceived': self.submissions_received,
                'department': self.department
            },
            'createdAt': isoformat(self.created_at)
        }
