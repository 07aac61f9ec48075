"""
User management routes.
"""
from flask import Blueprint, request, jsonify
import logging
from injector import inject

from services.user_service import UserService
from services.exceptions import ThesisWorkflowError

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__, url_prefix='/api/v1/users')


@users_bp.route('/register', methods=['POST'])
@inject
def register_user(user_service: UserService):
    """
    Register a new user in the system.

    Required fields:
    - fullName: User full name
    - email: Email address (unique)
    - role: student, faculty or admin (any casing)

    Optional: department, studentId (required for students), contactNumber,
    emailNotifications

    Returns:
        JSON with user information and success status
    """
    try:
        data = request.get_json(silent=True)

        if not data:
            return jsonify({'success': False, 'error': 'No JSON data provided'}), 400

        user = user_service.register_user(data)
        return jsonify({
            'success': True,
            'message': 'User registered successfully',
            'user': user.to_dict()
        }), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"Error registering user: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


@users_bp.route('/supervisors', methods=['GET'])
@inject
def list_supervisors(user_service: UserService):
    try:
        supervisors = user_service.list_supervisors()
        return jsonify({
            'success': True,
            'supervisors': [s.to_summary() for s in supervisors]
        })
    except Exception as e:
        logger.error(f"Error listing supervisors: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


@users_bp.route('/<int:user_id>', methods=['GET'])
@inject
def get_user(user_id: int, user_service: UserService):
    try:
        user = user_service.get_user(user_id)
        return jsonify({'success': True, 'user': user.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"Error getting user {user_id}: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


@users_bp.route('/<int:user_id>', methods=['PUT'])
@inject
def update_profile(user_id: int, user_service: UserService):
    """Body: any of fullName, department, contactNumber, emailNotifications."""
    try:
        data = request.get_json(silent=True) or {}
        user = user_service.update_profile(user_id, data)
        return jsonify({
            'success': True,
            'message': 'Profile updated successfully',
            'user': user.to_dict()
        })
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"Error updating profile for user {user_id}: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500


@users_bp.route('/<int:user_id>/notification-preferences', methods=['PUT'])
@inject
def update_notification_preferences(user_id: int, user_service: UserService):
    """Body: {"email": true|false}."""
    try:
        data = request.get_json(silent=True) or {}
        user = user_service.update_notification_preferences(user_id, data.get('email'))
        return jsonify({
            'success': True,
            'message': 'Notification preferences updated',
            'notificationPreferences': user.to_dict()['notificationPreferences']
        })
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"Error updating notification preferences for user {user_id}: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500
