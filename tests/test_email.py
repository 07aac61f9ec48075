"""
Email rendering and notification email consumer tests
"""
from unittest.mock import MagicMock, patch
import pytest

from consumers.notification_email_consumer import NotificationEmailConsumer
from database.connection import get_db_session
from models.notification import Notification
from models.user import Role
from repositories.notification_repository import NotificationRepository
from repositories.user_repository import UserRepository
from services.email_service import EmailService
from services.email_template_service import EmailTemplateService


class TestEmailTemplateService:

    def test_escapes_user_content(self):
        html_body, text_body = EmailTemplateService().render_notification(
            title='<b>Review</b>',
            message='Score < 50 & needs work',
            priority='high'
        )

        assert '&lt;b&gt;Review&lt;/b&gt;' in html_body
        assert 'Score &lt; 50 &amp; needs work' in html_body
        assert 'Score < 50 & needs work' in text_body

    def test_action_button_only_with_url_and_label(self):
        service = EmailTemplateService()

        with_action, text = service.render_notification(
            'Title', 'Body', action_url='http://localhost:3000/events', action_label='View Events'
        )
        without_action, _ = service.render_notification('Title', 'Body', action_url='http://x')

        assert 'href="http://localhost:3000/events"' in with_action
        assert 'View Events: http://localhost:3000/events' in text
        assert 'href=' not in without_action

    def test_unknown_template_type(self):
        with pytest.raises(ValueError):
            EmailTemplateService().get_template('digest')


class TestEmailService:

    def test_skips_when_smtp_not_configured(self):
        service = EmailService(EmailTemplateService())

        assert service.is_configured is False
        assert service.send_notification_email('a@example.com', 'Title', 'Body') is False


@pytest.fixture
def consumer(email_service):
    with patch('consumers.notification_email_consumer.KafkaConsumer', MagicMock()):
        yield NotificationEmailConsumer(email_service, UserRepository(), NotificationRepository())


def _stored_notification(email):
    with get_db_session() as session:
        return NotificationRepository().create(session, email=email, message='Hello', type='general')


class TestNotificationEmailConsumer:

    def test_sends_and_marks_delivered(self, consumer, email_service, make_user):
        user = make_user(Role.STUDENT)
        notification = _stored_notification(user.email)

        sent = consumer.handle_message({
            'notification_id': notification.id,
            'email': user.email,
            'title': 'New Event Added',
            'message': 'Hello',
            'priority': 'medium'
        })

        assert sent is True
        email_service.send_notification_email.assert_called_once()
        with get_db_session() as session:
            assert session.get(Notification, notification.id).delivered is True

    def test_skips_opted_out_users(self, consumer, email_service, make_user):
        user = make_user(Role.FACULTY, email_notifications=False)

        assert consumer.handle_message({'notification_id': 1, 'email': user.email, 'message': 'Hi'}) is False
        email_service.send_notification_email.assert_not_called()

    def test_skips_unknown_recipients(self, consumer, email_service):
        assert consumer.handle_message({'notification_id': 1, 'email': 'S123456', 'message': 'Hi'}) is False
        email_service.send_notification_email.assert_not_called()

    def test_failed_send_leaves_notification_undelivered(self, consumer, email_service, make_user):
        user = make_user(Role.STUDENT)
        notification = _stored_notification(user.email)
        email_service.send_notification_email.return_value = False

        assert consumer.handle_message({
            'notification_id': notification.id, 'email': user.email, 'message': 'Hello'
        }) is False
        with get_db_session() as session:
            assert session.get(Notification, notification.id).delivered is False
