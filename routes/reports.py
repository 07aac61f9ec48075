"""
Evaluation report routes.
"""
from flask import Blueprint, request, jsonify
import logging
from injector import inject

from services.report_service import ReportService
from services.exceptions import ThesisWorkflowError

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__, url_prefix='/api/v1/reports')


def _internal_error(action: str, e: Exception):
    logger.error(f"Error {action}: {e}")
    return jsonify({'success': False, 'error': 'Internal server error'}), 500


@reports_bp.route('', methods=['POST'])
@reports_bp.route('/', methods=['POST'], endpoint='save_report_slash')
@inject
def save_report(report_service: ReportService):
    """
    Save an evaluation report as a draft.

    Required JSON fields: studentId, studentName, facultyId, reportType
    Optional: thesisId, thesisVersion, thesisTitle, reportData
    """
    try:
        data = request.get_json(silent=True) or {}
        report = report_service.save_draft_report(data)
        return jsonify({
            'success': True,
            'message': 'Report saved successfully as draft',
            'report': report.to_dict()
        }), 201

    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error('saving report', e)


@reports_bp.route('/<int:report_id>', methods=['GET'])
@inject
def get_report(report_id: int, report_service: ReportService):
    try:
        report = report_service.get_report(report_id)
        return jsonify({'success': True, 'report': report.to_dict()})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'getting report {report_id}', e)


@reports_bp.route('/<int:report_id>', methods=['DELETE'])
@inject
def delete_report(report_id: int, report_service: ReportService):
    try:
        report_service.delete_report(report_id)
        return jsonify({'success': True, 'message': 'Report deleted successfully'})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'deleting report {report_id}', e)


@reports_bp.route('/<int:report_id>/send-to-student', methods=['PUT'])
@inject
def send_report_to_student(report_id: int, report_service: ReportService):
    """Deliver a report; thesis evaluations also approve the student's latest thesis."""
    try:
        result = report_service.send_report_to_student(report_id)
        thesis = result['thesis']
        return jsonify({
            'success': True,
            'message': 'Report sent to student successfully',
            'report': result['report'].to_dict(),
            'thesis': thesis.to_dict() if thesis else None
        })
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'sending report {report_id}', e)


@reports_bp.route('/student/<student_id>', methods=['GET'])
@inject
def list_student_reports(student_id: str, report_service: ReportService):
    try:
        reports = report_service.list_reports_for_student(student_id)
        return jsonify({'success': True, 'reports': [r.to_dict() for r in reports]})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'listing reports for student {student_id}', e)


@reports_bp.route('/faculty/<faculty_id>', methods=['GET'])
@inject
def list_faculty_reports(faculty_id: str, report_service: ReportService):
    try:
        reports = report_service.list_reports_for_faculty(faculty_id)
        return jsonify({'success': True, 'reports': [r.to_dict() for r in reports]})
    except ThesisWorkflowError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        return _internal_error(f'listing reports for faculty {faculty_id}', e)
