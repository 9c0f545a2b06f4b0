# ftl_backend/__init__.py
import os
import time
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify, send_from_directory, abort as flask_abort
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_talisman import Talisman
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .config import get_config_by_name, PROJECT_ROOT
from .models.base import db
from .audit_log_service import AuditLogService

# Initialize extensions without app object yet
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)
talisman = Talisman()

PROCESS_STARTED_AT = time.monotonic()

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'


def configure_logging(app):
    log_level_str = app.config.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    if app.debug:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        if not app.logger.handlers: app.logger.addHandler(handler)
        app.logger.setLevel(logging.DEBUG)
        return

    log_file = app.config.get('LOG_FILE')
    if log_file and not app.testing:
        handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024 * 100, backupCount=20)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(log_level)
    if not app.logger.handlers: app.logger.addHandler(handler)
    app.logger.setLevel(log_level)


def create_app(config_name=None):
    app_config = get_config_by_name(config_name)

    app = Flask(__name__,
                instance_path=os.path.join(PROJECT_ROOT, 'instance'),
                static_folder=None)
    app.config.from_object(app_config)

    configure_logging(app)

    app.logger.info(f"FTL backend starting with config: {app_config.ENV_NAME}")
    app.logger.info(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    app.logger.info(f"Upload folder: {app.config['UPLOAD_FOLDER']}")

    # Initialize extensions with app object
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    talisman_config = {
        'content_security_policy': app.config.get('CONTENT_SECURITY_POLICY'),
        'force_https': app.config.get('TALISMAN_FORCE_HTTPS', False),
        'strict_transport_security': app.config.get('TALISMAN_FORCE_HTTPS', False),
        'frame_options': 'DENY',
        'referrer_policy': 'strict-origin-when-cross-origin',
    }
    talisman.init_app(app, **talisman_config)

    CORS(app,
         resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}},
         supports_credentials=True,
         methods=app.config['CORS_METHODS'],
         allow_headers=app.config['CORS_ALLOW_HEADERS'])
    app.logger.info(f"CORS configured for origins: {', '.join(app.config['CORS_ORIGINS'])}")

    app.audit_log_service = AuditLogService(app=app)

    from .services.upload_service import ensure_upload_dirs
    ensure_upload_dirs(app)

    from .auth.tokens import register_jwt_callbacks
    register_jwt_callbacks(jwt)

    from .route_table import register_route_table
    register_route_table(app)
    app.logger.info("Route table registered.")

    from .database import register_db_commands
    register_db_commands(app)
    from .slider.cli import register_slider_commands
    register_slider_commands(app)

    # --- Health check ---
    @app.route('/api/health', methods=['GET'])
    def health_check():
        try:
            db.session.execute(text('SELECT 1'))
            db_status = 'connected'
        except SQLAlchemyError as e:
            app.logger.warning(f"Health check could not reach the database: {e}")
            db_status = 'disconnected'
        return jsonify({
            "status": "OK",
            "message": f"{app.config['SERVER_NAME_LABEL']} is running",
            "environment": app.config['ENV_NAME'],
            "database": db_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - PROCESS_STARTED_AT,
            "version": app.config['API_VERSION']
        })

    # --- Static file serving ---
    @app.route('/uploads/<path:filename>')
    def serve_upload(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.route('/images/<path:filename>')
    def serve_image(filename):
        return send_from_directory(app.config['IMAGE_FOLDER'], filename)

    if app.config.get('SERVE_CLIENT_BUILD'):
        register_client_build(app)

    register_error_handlers(app)
    return app


def register_client_build(app):
    """Serves the built single-page client, falling back to index.html for client-side routes."""
    build_folder = app.config['CLIENT_BUILD_FOLDER']
    if not os.path.isdir(build_folder):
        app.logger.warning(f"Client build folder not found at {build_folder}. SPA will not be served.")
        return

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def serve_client(path):
        if path.startswith('api/'):
            return flask_abort(404)
        if path and os.path.isfile(os.path.join(build_folder, path)):
            return send_from_directory(build_folder, path)
        return send_from_directory(build_folder, 'index.html')

    app.logger.info(f"Serving client build from {build_folder}")


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify(success=False, message=error.description or error.name), error.code

    @app.errorhandler(Exception)
    def unhandled_error(error):
        db.session.rollback()
        app.logger.error(f"Error: {error}", exc_info=True)
        return jsonify(success=False, message=str(error)), 500
