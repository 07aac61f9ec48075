"""
Main application entry point for the thesis tracking service.
"""
from flask import Flask
import atexit
import logging
from flask_injector import FlaskInjector

from config.injection import ServiceModule
from routes.health import health_bp
from routes.thesis import thesis_bp
from routes.notifications import notifications_bp
from routes.events import events_bp
from routes.users import users_bp
from routes.reports import reports_bp
from services.folder_scheduling_service import FolderSchedulingService
from database.connection import init_database
import config.settings as settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(modules=None):
    """
    Create and configure the Flask application.

    Args:
        modules: Extra injector modules, applied after ServiceModule so
            their bindings take precedence
    """
    app = Flask(__name__)

    # Configure Flask settings
    app.config['MAX_CONTENT_LENGTH'] = settings.MAX_CONTENT_LENGTH
    app.config['DEBUG'] = settings.DEBUG

    # Initialize database tables
    try:
        init_database()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")

    # Register blueprints
    app.register_blueprint(health_bp)
    app.register_blueprint(thesis_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(reports_bp)

    # Configure dependency injection
    flask_injector = FlaskInjector(app=app, modules=[ServiceModule] + list(modules or []))
    app.extensions['injector'] = flask_injector.injector

    return app


if __name__ == '__main__':
    app = create_app()

    # Pending folder timers die with the process; cancel them cleanly
    atexit.register(app.extensions['injector'].get(FolderSchedulingService).shutdown)

    app.run(
        host=settings.HOST,
        port=settings.PORT,
        debug=settings.DEBUG
    )
