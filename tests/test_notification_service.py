"""
Notification service tests
"""
from datetime import timedelta
import pytest

from models.timestamps import utcnow
from services.exceptions import InvalidInputError, NotFoundError


def _create(notification_service, **overrides):
    data = {
        'email': 'reader@example.com',
        'userId': 'S100001',
        'message': 'Your thesis was reviewed',
        'scheduledAt': utcnow().isoformat()
    }
    data.update(overrides)
    return notification_service.create_notification(data)


class TestNotify:

    def test_stores_then_enqueues_email(self, notification_service, kafka_service):
        notification = notification_service.notify(
            email='reader@example.com',
            message='Hello',
            title='Greeting',
            priority='high',
            action_url='http://localhost:3000/x',
            action_label='Open'
        )

        assert notification.id is not None
        assert notification.read is False
        assert notification.delivered is False
        kafka_service.publish_notification_email.assert_called_once_with(
            notification_id=notification.id,
            email='reader@example.com',
            title='Greeting',
            message='Hello',
            priority='high',
            action_url='http://localhost:3000/x',
            action_label='Open'
        )

    def test_publish_failure_keeps_record(self, notification_service, kafka_service):
        kafka_service.publish_notification_email.return_value = False

        notification = notification_service.notify(email='reader@example.com', message='Hello')

        assert notification is not None
        assert notification_service.get_counts(email='reader@example.com')['totalCount'] == 1

    def test_publish_exception_is_swallowed(self, notification_service, kafka_service):
        kafka_service.publish_notification_email.side_effect = ConnectionError('no broker')

        assert notification_service.notify(email='reader@example.com', message='Hello') is not None

    def test_store_failure_returns_none(self, notification_service, kafka_service):
        # A message is required by the table, so the insert fails
        assert notification_service.notify(email='reader@example.com', message=None) is None
        kafka_service.publish_notification_email.assert_not_called()


class TestCreateNotification:

    def test_applies_defaults(self, notification_service):
        notification = _create(notification_service)

        assert notification.type == 'general'
        assert notification.priority == 'medium'
        assert notification.user_id == 'S100001'

    @pytest.mark.parametrize('missing', ['email', 'message', 'scheduledAt'])
    def test_required_fields(self, notification_service, missing):
        with pytest.raises(InvalidInputError):
            _create(notification_service, **{missing: ''})

    def test_rejects_unknown_priority(self, notification_service):
        with pytest.raises(InvalidInputError):
            _create(notification_service, priority='urgent')

    def test_rejects_malformed_schedule(self, notification_service):
        with pytest.raises(InvalidInputError):
            _create(notification_service, scheduledAt='next tuesday')


class TestQueries:

    def test_list_filters_by_status_and_type(self, notification_service):
        first = _create(notification_service, type='general')
        _create(notification_service, type='resubmission_request')
        notification_service.mark_read(first.id)

        unread = notification_service.list_notifications(email='reader@example.com', status='unread')
        read = notification_service.list_notifications(email='reader@example.com', status='read')
        typed = notification_service.list_notifications(
            email='reader@example.com', type='resubmission_request'
        )

        assert [n.type for n in unread] == ['resubmission_request']
        assert [n.id for n in read] == [first.id]
        assert len(typed) == 1

    def test_list_matches_user_id_or_email(self, notification_service):
        _create(notification_service, email='a@example.com', userId='U1')
        _create(notification_service, email='b@example.com', userId='U2')

        assert len(notification_service.list_notifications(user_id='U2')) == 1
        assert len(notification_service.list_notifications(email='a@example.com', user_id='U2')) == 2

    def test_list_respects_limit(self, notification_service):
        for _ in range(3):
            _create(notification_service)

        assert len(notification_service.list_notifications(email='reader@example.com', limit=2)) == 2

    def test_mark_read_sets_timestamp(self, notification_service):
        notification = notification_service.mark_read(_create(notification_service).id)

        assert notification.read is True
        assert notification.read_at is not None

    def test_mark_read_unknown(self, notification_service):
        with pytest.raises(NotFoundError):
            notification_service.mark_read(4242)

    def test_mark_all_read_returns_count(self, notification_service):
        for _ in range(3):
            _create(notification_service)
        _create(notification_service, email='someone-else@example.com', userId='U9')

        assert notification_service.mark_all_read(email='reader@example.com') == 3
        assert notification_service.get_counts(email='reader@example.com') == {
            'totalCount': 3,
            'unreadCount': 0
        }
        assert notification_service.get_counts(email='someone-else@example.com')['unreadCount'] == 1

    def test_mark_all_read_needs_recipient(self, notification_service):
        with pytest.raises(InvalidInputError):
            notification_service.mark_all_read()

    def test_delete(self, notification_service):
        notification = _create(notification_service)

        notification_service.delete_notification(notification.id)

        assert notification_service.get_counts(email='reader@example.com')['totalCount'] == 0
        with pytest.raises(NotFoundError):
            notification_service.delete_notification(notification.id)

    def test_due_undelivered(self, notification_service):
        due = _create(notification_service, scheduledAt=(utcnow() - timedelta(hours=1)).isoformat())
        _create(notification_service, scheduledAt=(utcnow() + timedelta(days=1)).isoformat())
        delivered = _create(notification_service, scheduledAt=(utcnow() - timedelta(hours=2)).isoformat())
        notification_service.mark_delivered(delivered.id)

        assert [n.id for n in notification_service.get_due_undelivered('reader@example.com')] == [due.id]
