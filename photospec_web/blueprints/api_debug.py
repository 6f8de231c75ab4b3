"""
Debug and observability API blueprint for photospec Web.

Provides a health check and access to the in-memory error ring filled by the
application's global error handler.
"""
from __future__ import annotations

import os
import sqlite3
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from photospec_web.db import db_state, get_con_optional, q1

bp = Blueprint("api_debug", __name__)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@bp.get("/api/debug/health")
def api_debug_health():
    """Health check endpoint: DB connectivity, schema readiness, compound count."""
    health: Dict[str, Any] = {
        "status": "ok",
        "db": "unknown",
        "db_state": None,
        "compounds": None,
        "files_dir": current_app.config.get('PHOTOSPEC_FILES_DIR'),
        "files_dir_exists": os.path.isdir(current_app.config.get('PHOTOSPEC_FILES_DIR') or ""),
    }

    connection = get_con_optional()
    if connection is None:
        health["db"] = "disconnected"
        health["status"] = "degraded"
    else:
        health["db"] = "connected"

    state, message = db_state()
    health["db_state"] = state
    if state != "ready":
        health["status"] = "degraded"
        health["db_message"] = message
    else:
        try:
            row = q1(get_con_optional(), "SELECT COUNT(*) AS c FROM compounds")
            health["compounds"] = int((row or {}).get("c") or 0)
        except (sqlite3.Error, AttributeError) as exc:
            health["db"] = f"error: {exc}"
            health["status"] = "degraded"

    return jsonify(health)


# ---------------------------------------------------------------------------
# Error ring
# ---------------------------------------------------------------------------


@bp.get("/api/debug/errors")
def api_debug_errors():
    """Recent unhandled exceptions, newest last (?limit= to trim)."""
    ring = list(current_app.config.get('PHOTOSPEC_ERROR_RING') or [])
    limit = request.args.get("limit", type=int)
    if limit is not None and limit >= 0:
        ring = ring[-limit:] if limit else []
    return jsonify({"errors": ring, "count": len(ring)})


@bp.post("/api/debug/errors/clear")
def api_debug_errors_clear():
    current_app.config['PHOTOSPEC_ERROR_RING'] = []
    return jsonify({"ok": True})
