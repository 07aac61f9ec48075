"""
Thesis submission, resubmission and folder provisioning routes.
"""
from flask import Blueprint, request, jsonify
import logging
from injector import inject

from services.thesis_service import ThesisService
from services.folder_scheduling_service import FolderSchedulingService
from services.exceptions import ThesisWorkflowError

logger = logging.getLogger(__name__)

thesis_bp = Blueprint('thesis', __name__, url_prefix='/api/v1/thesis')


def _internal_error(action: str, e: Exception):
    logger.error(f"Error {action}: {e}")
    return jsonify({'success': False, 'error': 'Internal server error'}), 500


@thesis_bp.route('/upload', methods=['POST'])
@inject
def upload_thesis(thesis_service: ThesisService):
    """
    Submit the first version of a thesis.

    Required JSON fields:
    - studentName, studentId, department
    - fileUrl: URL returned by the file storage service
    - supervisorId: Faculty user id, email or full name

    Returns:
        201 with the created thesis
    """
    try:
        data = request.get_json(silent=True) or {}
        thesis = thesis_service.submit_initial(data)
        return jsonify({
            'success': True,
            'message': 'Thesis submitted successfully',
            'thesis': thesis.to_dict()
        }), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('submitting thesis', e)


@thesis_bp.route('/all', methods=['GET'])
@inject
def list_theses(thesis_service: ThesisService):
    try:
        theses = thesis_service.list_theses()
        return jsonify({'success': True, 'theses': [t.to_dict() for t in theses]})
    except Exception as e:
        return _internal_error('listing theses', e)


@thesis_bp.route('/<int:thesis_id>', methods=['GET'])
@inject
def get_thesis(thesis_id: int, thesis_service: ThesisService):
    try:
        thesis = thesis_service.get_thesis(thesis_id)
        return jsonify({'success': True, 'thesis': thesis.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting thesis {thesis_id}', e)


@thesis_bp.route('/by-student/<student_id>', methods=['GET'])
@inject
def get_thesis_by_student(student_id: str, thesis_service: ThesisService):
    """Latest thesis version of a student."""
    try:
        thesis = thesis_service.get_latest_for_student(student_id)
        return jsonify({'success': True, 'thesis': thesis.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting thesis for student {student_id}', e)


@thesis_bp.route('/by-supervisor/<int:supervisor_id>', methods=['GET'])
@inject
def get_theses_by_supervisor(supervisor_id: int, thesis_service: ThesisService):
    try:
        theses = thesis_service.list_by_supervisor(supervisor_id)
        return jsonify({'success': True, 'theses': [t.to_dict() for t in theses]})
    except Exception as e:
        return _internal_error(f'listing theses for supervisor {supervisor_id}', e)


@thesis_bp.route('/request-resubmission', methods=['POST'])
@inject
def request_resubmission(thesis_service: ThesisService):
    """
    Ask a student to resubmit their thesis.

    Required JSON fields:
    - thesisId, reason
    - facultyId: Must be the thesis supervisor
    """
    try:
        data = request.get_json(silent=True) or {}
        thesis = thesis_service.request_resubmission(
            data.get('thesisId'), data.get('reason'), data.get('facultyId')
        )
        return jsonify({
            'success': True,
            'message': 'Resubmission requested successfully',
            'thesis': thesis.to_dict()
        })

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('requesting resubmission', e)


@thesis_bp.route('/submit-resubmission', methods=['POST'])
@thesis_bp.route('/resubmit', methods=['POST'], endpoint='resubmit')
@inject
def submit_resubmission(thesis_service: ThesisService):
    """
    Submit a new version of a thesis after a resubmission request.

    Required JSON fields:
    - originalThesisId: Thesis that carries the request
    - studentId, fileUrl

    Optional: studentName, department
    """
    try:
        data = request.get_json(silent=True) or {}
        thesis = thesis_service.submit_resubmission(data)
        return jsonify({
            'success': True,
            'message': 'Thesis resubmitted successfully',
            'thesis': thesis.to_dict()
        }), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('submitting resubmission', e)


@thesis_bp.route('/version-history/<int:thesis_id>', methods=['GET'])
@inject
def get_version_history(thesis_id: int, thesis_service: ThesisService):
    try:
        history = thesis_service.get_version_history(thesis_id)
        return jsonify({'success': True, **history})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting version history for thesis {thesis_id}', e)


@thesis_bp.route('/status-history/<int:thesis_id>', methods=['GET'])
@inject
def get_status_history(thesis_id: int, thesis_service: ThesisService):
    try:
        history = thesis_service.get_status_history(thesis_id)
        return jsonify({'success': True, 'history': history})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting status history for thesis {thesis_id}', e)


@thesis_bp.route('/resubmission-status/<student_id>', methods=['GET'])
@inject
def get_resubmission_status(student_id: str, thesis_service: ThesisService):
    try:
        status = thesis_service.get_resubmission_status(student_id)
        return jsonify({'success': True, **status})
    except Exception as e:
        return _internal_error(f'checking resubmission status for {student_id}', e)


# Thesis folder routes
@thesis_bp.route('/create-folders', methods=['POST'])
@inject
def create_folders(folder_service: FolderSchedulingService):
    """Provision the folder of one event right away. Body: {eventId}."""
    data = request.get_json(silent=True) or {}
    event_id = data.get('eventId')
    if not event_id:
        return jsonify({'success': False, 'error': 'Event ID is required'}), 400

    success, result = folder_service.provision_folder(event_id)
    if success:
        return jsonify({'success': True, **result})
    return jsonify({'success': False, **result}), 400


@thesis_bp.route('/schedule-folder-creation', methods=['POST'])
@inject
def schedule_folder_creation(folder_service: FolderSchedulingService):
    """Schedule folder provisioning ahead of an event's due date. Body: {eventId}."""
    try:
        data = request.get_json(silent=True) or {}
        result = folder_service.schedule_folder_creation(data.get('eventId'))
        return jsonify({'success': True, **result})

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('scheduling folder creation', e)


@thesis_bp.route('/folder-status/<int:event_id>', methods=['GET'])
@inject
def get_folder_status(event_id: int, folder_service: FolderSchedulingService):
    try:
        status = folder_service.get_folder_status(event_id)
        return jsonify({'success': True, **status})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting folder status for event {event_id}', e)


@thesis_bp.route('/scheduled-folders', methods=['GET'])
@inject
def get_scheduled_folders(folder_service: FolderSchedulingService):
    try:
        schedules = folder_service.list_scheduled_folders()
        return jsonify({'success': True, 'folders': [s.to_dict() for s in schedules]})
    except Exception as e:
        return _internal_error('listing scheduled folders', e)


@thesis_bp.route('/manual-create-folders', methods=['POST'])
@inject
def manual_create_folders(folder_service: FolderSchedulingService):
    """Provision folders for every thesis event due within the lead time."""
    try:
        result = folder_service.provision_due_folders()
        return jsonify({'success': True, **result})
    except Exception as e:
        return _internal_error('running manual folder creation', e)
