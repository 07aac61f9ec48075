"""
Database models package.
"""
# Import all models for easy access
from .user import User, Role
from .thesis import Thesis, ThesisChain, ThesisStatus
from .notification import Notification
from .event import Event, EventType
from .thesis_folder import FolderSchedule, ThesisFolder
from .report import Report

# Import Base for table creation
from database import Base

# Export all models
__all__ = [
    'User',
    'Role',
    'Thesis',
    'ThesisChain',
    'ThesisStatus',
    'Notification',
    'Event',
    'EventType',
    'FolderSchedule',
    'ThesisFolder',
    'Report',
    'Base'
]
