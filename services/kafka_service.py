"""
Kafka Service for enqueuing notification tasks.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from kafka import KafkaProducer
from kafka.errors import KafkaError
import config.settings as settings

logger = logging.getLogger(__name__)


class KafkaService:
    """Service for handling Kafka operations."""

    def __init__(self):
        """Initialize Kafka service."""
        self.bootstrap_servers = settings.KAFKA_BOOTSTRAP_SERVERS
        self.producer = None
        self._init_producer()

    def _init_producer(self) -> None:
        """Initialize Kafka producer."""
        try:
            self.producer = KafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                value_serializer=lambda x: json.dumps(x).encode('utf-8'),
                key_serializer=lambda x: x.encode('utf-8') if x else None,
                acks='all',  # Wait for all replicas to acknowledge
                retries=3,
                retry_backoff_ms=1000,
                request_timeout_ms=30000
            )
            logger.info(f"Kafka producer initialized with servers: {self.bootstrap_servers}")
        except Exception as e:
            logger.error(f"Failed to initialize Kafka producer: {e}")
            self.producer = None

    def publish_notification_email(
        self,
        notification_id: int,
        email: str,
        title: Optional[str],
        message: str,
        priority: str = 'medium',
        action_url: Optional[str] = None,
        action_label: Optional[str] = None
    ) -> bool:
        """
        Publish an email delivery task for a stored notification.

        Args:
            notification_id: Database ID of the notification
            email: Recipient email address
            title: Notification title, also used as the subject
            message: Notification body
            priority: low, medium or high
            action_url: Optional call-to-action link
            action_label: Optional call-to-action label

        Returns:
            True if published successfully, False otherwise
        """
        payload = {
            'notification_id': notification_id,
            'email': email,
            'title': title,
            'message': message,
            'priority': priority,
            'action_url': action_url,
            'action_label': action_label,
            'timestamp': self._get_timestamp()
        }

        return self._publish_message(
            topic=settings.NOTIFICATION_EMAIL_TOPIC,
            key=str(notification_id),
            value=payload
        )

    def _publish_message(self, topic: str, key: str, value: Dict[str, Any]) -> bool:
        """
        Publish message to Kafka topic.

        Args:
            topic: Kafka topic name
            key: Message key
            value: Message value

        Returns:
            True if published successfully, False otherwise
        """
        if not self.producer:
            logger.error("Kafka producer not initialized")
            return False

        try:
            future = self.producer.send(topic, key=key, value=value)
            record_metadata = future.get(timeout=10)
            logger.info(
                f"Message published to {topic} - "
                f"partition: {record_metadata.partition}, "
                f"offset: {record_metadata.offset}"
            )
            return True

        except KafkaError as e:
            logger.error(f"Failed to publish message to {topic}: {e}")
            return False

    def _get_timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def close(self) -> None:
        """Close Kafka producer."""
        if self.producer:
            self.producer.close()
            logger.info("Kafka producer closed")
