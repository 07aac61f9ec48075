"""
Notification Email Consumer for delivering queued notification emails.
"""
import json
import logging
from typing import Dict, Any
from kafka import KafkaConsumer
from injector import inject

from database.connection import get_db_session
from repositories.notification_repository import NotificationRepository
from repositories.user_repository import UserRepository
from services.email_service import EmailService
import config.settings as settings

logger = logging.getLogger(__name__)


class NotificationEmailConsumer:
    """Consumer for notification.email topic - sends notification emails."""

    @inject
    def __init__(
        self,
        email_service: EmailService,
        user_repository: UserRepository,
        notification_repository: NotificationRepository
    ):
        """Initialize notification email consumer."""
        self.email_service = email_service
        self.user_repository = user_repository
        self.notification_repository = notification_repository
        self.consumer = None

        self._init_consumer()

    def _init_consumer(self) -> None:
        """Initialize Kafka consumer."""
        try:
            self.consumer = KafkaConsumer(
                settings.NOTIFICATION_EMAIL_TOPIC,
                bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                value_deserializer=lambda m: json.loads(m.decode('utf-8')),
                key_deserializer=lambda m: m.decode('utf-8') if m else None,
                group_id=settings.KAFKA_CONSUMER_GROUP,
                auto_offset_reset='earliest',
                enable_auto_commit=True
            )
            logger.info("Notification email consumer initialized")
        except Exception as e:
            logger.error(f"Failed to initialize notification email consumer: {e}")
            self.consumer = None

    def process_messages(self) -> None:
        """Process messages from notification.email topic."""
        if not self.consumer:
            logger.error("Consumer not initialized")
            return

        logger.info("Starting notification email message processing...")

        try:
            for message in self.consumer:
                try:
                    self.handle_message(message.value)
                except Exception as e:
                    logger.error(f"Error processing notification email message: {e}")
                    # Continue processing other messages
        except KeyboardInterrupt:
            logger.info("Stopping notification email consumer...")
        except Exception as e:
            logger.error(f"Error in notification email consumer: {e}")
        finally:
            if self.consumer:
                self.consumer.close()

    def handle_message(self, message: Dict[str, Any]) -> bool:
        """
        Deliver one notification email.

        Recipients that are unknown or have email notifications turned off
        are skipped.

        Returns:
            True if an email was sent
        """
        notification_id = message.get('notification_id')
        email = message.get('email')

        with get_db_session() as session:
            user = self.user_repository.get_by_email(session, email)
            if not user:
                logger.info(f"Skipping email for notification {notification_id}: no user with email {email}")
                return False
            if not user.email_notifications:
                logger.info(f"Skipping email for notification {notification_id}: {email} opted out")
                return False
            recipient = user.email

        sent = self.email_service.send_notification_email(
            to=recipient,
            title=message.get('title') or 'Notification',
            message=message.get('message') or '',
            priority=message.get('priority') or 'medium',
            action_url=message.get('action_url'),
            action_label=message.get('action_label')
        )

        if not sent:
            logger.warning(f"Email for notification {notification_id} was not sent to {recipient}")
            return False

        if notification_id is not None:
            with get_db_session() as session:
                notification = self.notification_repository.get_by_id(session, int(notification_id))
                if notification:
                    notification.delivered = True

        logger.info(f"Notification {notification_id} emailed to {recipient}")
        return True
