"""
Dependency injection configuration using Flask-Injector.
"""
from injector import Module, provider, singleton
from services.s3_service import S3Service
from services.kafka_service import KafkaService
from services.email_template_service import EmailTemplateService
from services.email_service import EmailService
from services.notification_service import NotificationService
from services.user_service import UserService
from services.thesis_service import ThesisService
from services.event_service import EventService
from services.folder_scheduling_service import FolderSchedulingService
from services.report_service import ReportService
from repositories.user_repository import UserRepository
from repositories.thesis_repository import ThesisRepository, ThesisChainRepository
from repositories.notification_repository import NotificationRepository
from repositories.event_repository import EventRepository
from repositories.folder_repository import FolderScheduleRepository, ThesisFolderRepository
from repositories.report_repository import ReportRepository


class ServiceModule(Module):
    """Module that configures dependency injection bindings."""

    @singleton
    @provider
    def provide_s3_service(self) -> S3Service:
        """Provide S3 service instance."""
        return S3Service()

    @singleton
    @provider
    def provide_kafka_service(self) -> KafkaService:
        """Provide Kafka service instance."""
        return KafkaService()

    @singleton
    @provider
    def provide_email_template_service(self) -> EmailTemplateService:
        """Provide email template service instance."""
        return EmailTemplateService()

    @singleton
    @provider
    def provide_email_service(self, template_service: EmailTemplateService) -> EmailService:
        """Provide email service instance with template service injected."""
        return EmailService(template_service)

    @singleton
    @provider
    def provide_notification_service(
        self,
        kafka_service: KafkaService,
        notification_repository: NotificationRepository
    ) -> NotificationService:
        """Provide notification service instance."""
        return NotificationService(kafka_service, notification_repository)

    @singleton
    @provider
    def provide_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user service instance."""
        return UserService(user_repository)

    @singleton
    @provider
    def provide_thesis_service(
        self,
        thesis_repository: ThesisRepository,
        chain_repository: ThesisChainRepository,
        user_service: UserService,
        notification_service: NotificationService
    ) -> ThesisService:
        """Provide thesis service instance with dependencies injected."""
        return ThesisService(thesis_repository, chain_repository, user_service, notification_service)

    @singleton
    @provider
    def provide_event_service(
        self,
        event_repository: EventRepository,
        user_service: UserService,
        notification_service: NotificationService
    ) -> EventService:
        """Provide event service instance."""
        return EventService(event_repository, user_service, notification_service)

    @singleton
    @provider
    def provide_folder_scheduling_service(
        self,
        s3_service: S3Service,
        event_repository: EventRepository,
        schedule_repository: FolderScheduleRepository,
        folder_repository: ThesisFolderRepository
    ) -> FolderSchedulingService:
        """Provide folder scheduling service; a singleton so its timer table is shared."""
        return FolderSchedulingService(s3_service, event_repository, schedule_repository, folder_repository)

    @singleton
    @provider
    def provide_report_service(
        self,
        report_repository: ReportRepository,
        thesis_service: ThesisService
    ) -> ReportService:
        """Provide report service instance."""
        return ReportService(report_repository, thesis_service)

    # Repository Providers
    @singleton
    @provider
    def provide_user_repository(self) -> UserRepository:
        """Provide user repository instance."""
        return UserRepository()

    @singleton
    @provider
    def provide_thesis_repository(self) -> ThesisRepository:
        """Provide thesis repository instance."""
        return ThesisRepository()

    @singleton
    @provider
    def provide_thesis_chain_repository(self) -> ThesisChainRepository:
        """Provide thesis chain counter repository instance."""
        return ThesisChainRepository()

    @singleton
    @provider
    def provide_notification_repository(self) -> NotificationRepository:
        """Provide notification repository instance."""
        return NotificationRepository()

    @singleton
    @provider
    def provide_event_repository(self) -> EventRepository:
        """Provide event repository instance."""
        return EventRepository()

    @singleton
    @provider
    def provide_folder_schedule_repository(self) -> FolderScheduleRepository:
        """Provide folder schedule repository instance."""
        return FolderScheduleRepository()

    @singleton
    @provider
    def provide_thesis_folder_repository(self) -> ThesisFolderRepository:
        """Provide thesis folder repository instance."""
        return ThesisFolderRepository()

    @singleton
    @provider
    def provide_report_repository(self) -> ReportRepository:
        """Provide report repository instance."""
        return ReportRepository()
