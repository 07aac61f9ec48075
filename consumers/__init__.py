"""
Kafka Consumers package for notification delivery.
"""

from .notification_email_consumer import NotificationEmailConsumer

__all__ = [
    'NotificationEmailConsumer'
]
