"""
Thesis tracking service - test configuration and fixtures.
"""
import os
from unittest.mock import MagicMock
import pytest
from faker import Faker
from injector import Module, singleton

# Set testing environment before the settings module is imported
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['KAFKA_BOOTSTRAP_SERVERS'] = 'localhost:9092'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''

from database import Base
from database.connection import engine, get_db_session
import models  # noqa: F401  registers every table on Base.metadata
from models.user import User, Role
from models.thesis import Thesis
from models.event import Event
from models.timestamps import utcnow
from repositories.user_repository import UserRepository
from repositories.thesis_repository import ThesisRepository, ThesisChainRepository
from repositories.notification_repository import NotificationRepository
from repositories.event_repository import EventRepository
from repositories.folder_repository import FolderScheduleRepository, ThesisFolderRepository
from repositories.report_repository import ReportRepository
from services.kafka_service import KafkaService
from services.s3_service import S3Service
from services.email_service import EmailService
from services.notification_service import NotificationService
from services.user_service import UserService
from services.thesis_service import ThesisService
from services.event_service import EventService
from services.folder_scheduling_service import FolderSchedulingService
from services.report_service import ReportService

fake = Faker()


@pytest.fixture(autouse=True)
def database():
    """Create a fresh schema for each test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def kafka_service() -> MagicMock:
    service = MagicMock(spec=KafkaService)
    service.publish_notification_email.return_value = True
    return service


@pytest.fixture
def s3_service() -> MagicMock:
    service = MagicMock(spec=S3Service)
    service.create_folder.side_effect = lambda path: f"http://localhost:4566/thesis-documents/{path}/"
    return service


@pytest.fixture
def email_service() -> MagicMock:
    service = MagicMock(spec=EmailService)
    service.send_notification_email.return_value = True
    return service


@pytest.fixture
def notification_service(kafka_service) -> NotificationService:
    return NotificationService(kafka_service, NotificationRepository())


@pytest.fixture
def user_service() -> UserService:
    return UserService(UserRepository())


@pytest.fixture
def thesis_service(user_service, notification_service) -> ThesisService:
    return ThesisService(ThesisRepository(), ThesisChainRepository(), user_service, notification_service)


@pytest.fixture
def event_service(user_service, notification_service) -> EventService:
    return EventService(EventRepository(), user_service, notification_service)


@pytest.fixture
def folder_service(s3_service):
    service = FolderSchedulingService(
        s3_service, EventRepository(), FolderScheduleRepository(), ThesisFolderRepository()
    )
    yield service
    service.shutdown()


@pytest.fixture
def report_service(thesis_service) -> ReportService:
    return ReportService(ReportRepository(), thesis_service)


@pytest.fixture
def make_user():
    """Factory that stores a user and returns it"""
    def _make_user(role: Role = Role.STUDENT, **overrides) -> User:
        fields = {
            'full_name': fake.name(),
            'email': fake.unique.email(),
            'role': role.value,
            'department': 'Computer Science',
            'student_id': fake.unique.bothify('S######') if role == Role.STUDENT else None,
            'email_notifications': True,
            'created_at': utcnow(),
            'updated_at': utcnow()
        }
        fields.update(overrides)
        with get_db_session() as session:
            return UserRepository().create(session, **fields)
    return _make_user


@pytest.fixture
def faculty(make_user) -> User:
    return make_user(Role.FACULTY)


@pytest.fixture
def student(make_user) -> User:
    return make_user(Role.STUDENT)


@pytest.fixture
def submitted_thesis(thesis_service, student, faculty) -> Thesis:
    """Version 1 of the student's thesis, supervised by faculty"""
    return thesis_service.submit_initial({
        'studentName': student.full_name,
        'studentId': student.student_id,
        'department': 'Computer Science',
        'fileUrl': 'https://files.example.com/thesis-v1.pdf',
        'supervisorId': faculty.id
    })


@pytest.fixture
def make_event():
    """Factory that stores an event directly, bypassing announcements"""
    def _make_event(type: str = 'Thesis Submission', end_date=None, **overrides) -> Event:
        fields = {
            'name': fake.catch_phrase(),
            'type': type,
            'end_date': end_date or utcnow(),
            'thesis_folder_created': False,
            'created_at': utcnow(),
            'updated_at': utcnow()
        }
        fields.update(overrides)
        with get_db_session() as session:
            return EventRepository().create(session, **fields)
    return _make_event


@pytest.fixture
def load_thesis():
    """Re-read a thesis in a fresh session"""
    def _load(thesis_id: int) -> Thesis:
        with get_db_session() as session:
            return session.get(Thesis, thesis_id)
    return _load


class MockedInfrastructureModule(Module):
    """Replaces external collaborators with the test doubles"""

    def __init__(self, kafka_service, s3_service, email_service):
        self.kafka_service = kafka_service
        self.s3_service = s3_service
        self.email_service = email_service

    def configure(self, binder):
        binder.bind(KafkaService, to=self.kafka_service, scope=singleton)
        binder.bind(S3Service, to=self.s3_service, scope=singleton)
        binder.bind(EmailService, to=self.email_service, scope=singleton)


@pytest.fixture
def app(kafka_service, s3_service, email_service):
    from main import create_app

    flask_app = create_app(modules=[MockedInfrastructureModule(kafka_service, s3_service, email_service)])
    flask_app.config['TESTING'] = True
    yield flask_app
    flask_app.extensions['injector'].get(FolderSchedulingService).shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
