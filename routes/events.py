"""
Calendar event routes.
"""
from flask import Blueprint, request, jsonify
import logging
from injector import inject

from services.event_service import EventService
from services.exceptions import ThesisWorkflowError

logger = logging.getLogger(__name__)

events_bp = Blueprint('events', __name__, url_prefix='/api/v1/events')


def _internal_error(action: str, e: Exception):
    logger.error(f"Error {action}: {e}")
    return jsonify({'success': False, 'error': 'Internal server error'}), 500


@events_bp.route('', methods=['GET'])
@events_bp.route('/', methods=['GET'], endpoint='list_events_slash')
@inject
def list_events(event_service: EventService):
    try:
        events = event_service.list_events()
        return jsonify({'success': True, 'events': [e.to_dict() for e in events]})
    except Exception as e:
        return _internal_error('listing events', e)


@events_bp.route('', methods=['POST'])
@events_bp.route('/', methods=['POST'], endpoint='create_event_slash')
@inject
def create_event(event_service: EventService):
    """
    Create an event and notify students and faculty.

    Required JSON fields: name, endDate
    Optional: type, startDate, description
    """
    try:
        data = request.get_json(silent=True) or {}
        event = event_service.create_event(data)
        return jsonify({'success': True, 'event': event.to_dict()}), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('creating event', e)


@events_bp.route('/<int:event_id>', methods=['PUT'])
@inject
def update_event(event_id: int, event_service: EventService):
    try:
        data = request.get_json(silent=True) or {}
        event = event_service.update_event(event_id, data)
        return jsonify({'success': True, 'event': event.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'updating event {event_id}', e)


@events_bp.route('/<int:event_id>', methods=['DELETE'])
@inject
def delete_event(event_id: int, event_service: EventService):
    try:
        event_service.delete_event(event_id)
        return jsonify({'success': True, 'message': 'Event deleted'})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'deleting event {event_id}', e)
