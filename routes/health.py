"""
Health check routes for the application.
"""
from flask import Blueprint, jsonify
import logging

from database.connection import health_check as database_health_check

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/api/v1')


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    database_status = database_health_check()

    return jsonify({
        "status": "healthy" if database_status else "degraded",
        "version": "1.0.0",
        "api_version": "v1",
        "database_available": database_status
    }), 200 if database_status else 503
