"""
Application Factory - Flask App Creation

Builds the Flask application, wires the paper builder services into
``app.extensions`` and registers the routes and error handlers.
"""

import os
import time
from typing import Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from src.config import Config, ConfigManager
from src.services.ocr_service import GeminiOCRService
from src.services.pagination_service import PaginationService
from src.services.paper_session import SessionStore
from src.services.pdf_export_service import PDFExportService
from utils.logger import logger
from webapp.config import get_config


def create_app(config_name: str = "development", settings: Optional[Config] = None) -> Flask:
    """
    Application factory function.

    Args:
        config_name: Configuration environment name
        settings: Application settings; read from the environment when omitted

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__, template_folder="templates")

    settings = settings or ConfigManager().config
    flask_config = get_config(config_name)
    app.config.from_object(flask_config)
    flask_config.init_app(app, settings)

    app.config["SECRET_KEY"] = settings.secret_key
    app.config["PAPER_SETTINGS"] = settings
    app.json.ensure_ascii = False

    # Initialize extensions
    _init_extensions(app)

    # Initialize paper builder services
    _init_services(app, settings)

    # Register blueprints
    _register_blueprints(app)

    # Set up error handlers
    _setup_error_handlers(app)

    # Request timing and security headers
    _init_request_hooks(app)

    logger.info(f"Flask application created successfully (config: {config_name})")

    return app


def _init_extensions(app: Flask) -> None:
    """Initialize Flask extensions."""
    # CORS configuration
    allowed_origins = os.getenv("ALLOWED_ORIGINS", "*")
    if allowed_origins != "*":
        # Parse comma-separated origins
        origins = [origin.strip() for origin in allowed_origins.split(",")]
        CORS(app, origins=origins, supports_credentials=True)
    else:
        CORS(app, supports_credentials=True)


def _init_services(app: Flask, settings: Config) -> None:
    """Create the services shared by all requests."""
    pagination = PaginationService(attribution=settings.footer_attribution)

    app.extensions["paper_sessions"] = SessionStore(
        default_school_name=settings.default_school_name,
        default_font_size=settings.default_font_size,
        max_images=settings.max_images,
    )
    app.extensions["ocr_service"] = GeminiOCRService(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_api_url,
        timeout=settings.ocr_timeout,
        max_file_size_mb=settings.max_file_size_mb,
        allow_no_key=True,
    )
    app.extensions["pagination"] = pagination
    app.extensions["pdf_export"] = PDFExportService(
        output_dir=settings.output_dir,
        font_path=settings.pdf_font_path or None,
        pagination=pagination,
    )


def _register_blueprints(app: Flask) -> None:
    """Register application blueprints."""
    from webapp.routes.paper_routes import paper_bp

    app.register_blueprint(paper_bp)

    @app.route("/health")
    def health():
        ocr_service = app.extensions["ocr_service"]
        return jsonify(
            {
                "status": "healthy",
                "version": app.config["APP_VERSION"],
                "ocr_available": ocr_service.is_available(),
                "active_sessions": len(app.extensions["paper_sessions"]),
                "metrics": logger.get_metrics(),
            }
        )


def _setup_error_handlers(app: Flask) -> None:
    """Set up global error handlers."""
    from src.exceptions import ApplicationError
    from webapp.error_handlers import (
        handle_400,
        handle_404,
        handle_405,
        handle_413,
        handle_500,
        handle_application_error,
    )

    app.register_error_handler(ApplicationError, handle_application_error)
    app.register_error_handler(400, handle_400)
    app.register_error_handler(404, handle_404)
    app.register_error_handler(405, handle_405)
    app.register_error_handler(413, handle_413)
    app.register_error_handler(500, handle_500)


def _init_request_hooks(app: Flask) -> None:
    """Log API calls with their duration and add security headers."""

    @app.before_request
    def start_timer():
        g.request_started = time.time()

    @app.after_request
    def finish_request(response):
        if request.path.startswith("/api/"):
            duration = time.time() - g.get("request_started", time.time())
            logger.log_api_call(request.path, request.method, response.status_code, duration)
        for header, value in app.config.get("SECURITY_HEADERS", {}).items():
            response.headers.setdefault(header, value)
        return response
