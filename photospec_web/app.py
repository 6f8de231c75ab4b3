"""
Application factory for photospec Web.

Wires together blueprints, DB lifecycle, error handling, and request middleware.
"""
from __future__ import annotations

import os
import traceback as tb
from datetime import datetime, timezone
from time import perf_counter
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError

from photospec.util.logging import get_logger
from photospec_web.config import ERROR_RING_MAX, FILES_DIR, SLOW_REQUEST_MS
from photospec_web.db import init_db

logger = get_logger(__name__)


def create_app(db_path: str, files_dir: Optional[str] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(
        __name__,
        template_folder=os.path.join(os.path.dirname(__file__), "..", "templates"),
    )

    # ------------------------------------------------------------------
    # App-level state
    # ------------------------------------------------------------------
    init_db(app, db_path)
    app.config['PHOTOSPEC_FILES_DIR'] = os.path.abspath(files_dir or FILES_DIR)
    app.config['PHOTOSPEC_ERROR_RING'] = []
    app.config['PHOTOSPEC_ERROR_RING_MAX'] = ERROR_RING_MAX

    if app.config['PHOTOSPEC_DB_ERROR']:
        logger.warning("Database %s not available yet: %s", db_path, app.config['PHOTOSPEC_DB_ERROR'])

    # ------------------------------------------------------------------
    # Request timing middleware
    # ------------------------------------------------------------------

    @app.before_request
    def log_request_start():
        request._start_time = perf_counter()

    @app.after_request
    def log_request_end(response):
        if hasattr(request, "_start_time"):
            duration_ms = (perf_counter() - request._start_time) * 1000
            if duration_ms > SLOW_REQUEST_MS or response.status_code >= 400:
                logger.debug(
                    "%s %s -> %d (%.1fms)",
                    request.method,
                    request.path,
                    response.status_code,
                    duration_ms,
                    extra={"duration_ms": round(duration_ms, 1), "path": request.path},
                )
        return response

    # ------------------------------------------------------------------
    # Global error handler -> ring buffer
    # ------------------------------------------------------------------

    @app.errorhandler(Exception)
    def capture_error_to_ring(exc):
        if isinstance(exc, HTTPException):
            return exc

        ring = app.config['PHOTOSPEC_ERROR_RING']
        ring.append(
            {
                "ts": datetime.now(timezone.utc)
                .isoformat(timespec="milliseconds")
                .replace("+00:00", "Z"),
                "path": request.path,
                "method": request.method,
                "error": str(exc),
                "type": type(exc).__name__,
                "traceback": "".join(tb.format_exception(type(exc), exc, exc.__traceback__)),
            }
        )
        while len(ring) > app.config['PHOTOSPEC_ERROR_RING_MAX']:
            ring.pop(0)

        logger.error(
            "Unhandled error on %s %s: %s",
            request.method,
            request.path,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"error_type": type(exc).__name__, "path": request.path},
        )
        if request.path.startswith("/api/"):
            return jsonify({"error": "Internal server error"}), 500
        return InternalServerError()

    # ------------------------------------------------------------------
    # Register blueprints
    # ------------------------------------------------------------------
    from photospec_web.blueprints.api_compounds import bp as api_compounds_bp
    from photospec_web.blueprints.api_debug import bp as api_debug_bp
    from photospec_web.blueprints.api_distributions import bp as api_distributions_bp
    from photospec_web.blueprints.api_spectra import bp as api_spectra_bp
    from photospec_web.blueprints.files import bp as files_bp
    from photospec_web.blueprints.views import bp as views_bp

    app.register_blueprint(api_compounds_bp)
    app.register_blueprint(api_debug_bp)
    app.register_blueprint(api_distributions_bp)
    app.register_blueprint(api_spectra_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(views_bp)

    return app
