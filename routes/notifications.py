"""
Notification routes.
"""
from flask import Blueprint, request, jsonify
import logging
from injector import inject

from services.notification_service import NotificationService
from services.exceptions import ThesisWorkflowError

logger = logging.getLogger(__name__)

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/v1/notifications')


def _internal_error(action: str, e: Exception):
    logger.error(f"Error {action}: {e}")
    return jsonify({'success': False, 'error': 'Internal server error'}), 500


@notifications_bp.route('', methods=['GET'])
@notifications_bp.route('/', methods=['GET'], endpoint='list_notifications_slash')
@inject
def list_notifications(notification_service: NotificationService):
    """
    List notifications, newest first.

    Query parameters:
    - email, userId: Recipient filters
    - status: all (default), read or unread
    - type: Notification type
    - limit: Maximum results (default 50)
    """
    try:
        try:
            limit = int(request.args.get('limit', 50))
        except ValueError:
            return jsonify({'success': False, 'error': 'limit must be an integer'}), 400

        notifications = notification_service.list_notifications(
            email=request.args.get('email'),
            user_id=request.args.get('userId'),
            status=request.args.get('status', 'all'),
            type=request.args.get('type'),
            limit=limit
        )
        return jsonify({
            'success': True,
            'notifications': [n.to_dict() for n in notifications]
        })
    except Exception as e:
        return _internal_error('listing notifications', e)


@notifications_bp.route('', methods=['POST'])
@notifications_bp.route('/', methods=['POST'], endpoint='create_notification_slash')
@inject
def create_notification(notification_service: NotificationService):
    """
    Create a notification.

    Required JSON fields: email, message, scheduledAt
    Optional: userId, type, title, priority, relatedThesisId, actionUrl,
    actionLabel, metadata
    """
    try:
        data = request.get_json(silent=True) or {}
        notification = notification_service.create_notification(data)
        return jsonify({'success': True, 'notification': notification.to_dict()}), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('creating notification', e)


@notifications_bp.route('/count', methods=['GET'])
@inject
def count_notifications(notification_service: NotificationService):
    try:
        counts = notification_service.get_counts(
            user_id=request.args.get('userId'),
            email=request.args.get('email')
        )
        return jsonify({'success': True, **counts})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('counting notifications', e)


@notifications_bp.route('/due', methods=['GET'])
@inject
def due_notifications(notification_service: NotificationService):
    """Notifications whose scheduled time has passed and were not delivered yet."""
    try:
        notifications = notification_service.get_due_undelivered(request.args.get('email'))
        return jsonify({
            'success': True,
            'notifications': [n.to_dict() for n in notifications]
        })
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('listing due notifications', e)


@notifications_bp.route('/read-all', methods=['POST'])
@inject
def mark_all_read(notification_service: NotificationService):
    try:
        data = request.get_json(silent=True) or {}
        modified = notification_service.mark_all_read(
            user_id=data.get('userId'),
            email=data.get('email')
        )
        return jsonify({
            'success': True,
            'message': 'All notifications marked as read',
            'modifiedCount': modified
        })
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('marking notifications as read', e)


@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@inject
def mark_read(notification_id: int, notification_service: NotificationService):
    try:
        notification = notification_service.mark_read(notification_id)
        return jsonify({'success': True, 'notification': notification.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'marking notification {notification_id} as read', e)


@notifications_bp.route('/<int:notification_id>/delivered', methods=['POST'])
@inject
def mark_delivered(notification_id: int, notification_service: NotificationService):
    try:
        notification = notification_service.mark_delivered(notification_id)
        return jsonify({'success': True, 'notification': notification.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'marking notification {notification_id} as delivered', e)


@notifications_bp.route('/<int:notification_id>', methods=['DELETE'])
@inject
def delete_notification(notification_id: int, notification_service: NotificationService):
    try:
        notification_service.delete_notification(notification_id)
        return jsonify({'success': True, 'message': 'Notification deleted'})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'deleting notification {notification_id}', e)
