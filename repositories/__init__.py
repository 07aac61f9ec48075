"""
Repository pattern implementation for database operations.
"""

from .base_repository import BaseRepository
from .user_repository import UserRepository
from .thesis_repository import ThesisRepository, ThesisChainRepository
from .notification_repository import NotificationRepository
from .event_repository import EventRepository
from .folder_repository import FolderScheduleRepository, ThesisFolderRepository
from .report_repository import ReportRepository

__all__ = [
    'BaseRepository',
    'UserRepository',
    'ThesisRepository',
    'ThesisChainRepository',
    'NotificationRepository',
    'EventRepository',
    'FolderScheduleRepository',
    'ThesisFolderRepository',
    'ReportRepository'
]
