"""
Compound API blueprint for photospec Web.

Provides compound search and per-database browsing endpoints.
"""
from __future__ import annotations

import sqlite3

from flask import Blueprint, jsonify, request

from photospec.util.logging import get_logger, log_exception
from photospec_web.compounds import (
    compounds_in_database,
    list_compounds,
    list_databases,
    search_compounds,
    search_compounds_in_database,
)
from photospec_web.config import BROWSE_LIMIT, SEARCH_LIMIT
from photospec_web.db import get_con

bp = Blueprint("api_compounds", __name__)

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Compound search
# ---------------------------------------------------------------------------


@bp.get("/api/compounds")
def api_compounds():
    """Search compounds by name or id (?q=), or list all with spectra."""
    query = (request.args.get("q") or "").strip()
    try:
        con = get_con()
        if query:
            compounds = search_compounds(con, query, limit=SEARCH_LIMIT)
        else:
            compounds = list_compounds(con)
    except RuntimeError as exc:
        return jsonify({"error": str(exc)}), 503
    except sqlite3.Error:
        log_exception(logger, "Error fetching compounds", error_type="db_read")
        return jsonify({"error": "Failed to fetch compounds"}), 500
    return jsonify(compounds)


# ---------------------------------------------------------------------------
# Database browsing
# ---------------------------------------------------------------------------


@bp.get("/api/databases")
def api_databases():
    """
    Without ?database=, list source databases with compound counts.
    With ?database=, list its compounds (?limit=, default 15) or search them (?q=).
    """
    database_name = (request.args.get("database") or "").strip()
    query = (request.args.get("q") or "").strip()
    limit = request.args.get("limit", type=int) or BROWSE_LIMIT
    limit = max(1, min(limit, SEARCH_LIMIT))

    try:
        con = get_con()
        if not database_name:
            payload = list_databases(con)
        elif query:
            payload = search_compounds_in_database(con, database_name, query)
        else:
            payload = compounds_in_database(con, database_name, limit=limit)
    except RuntimeError as exc:
        return jsonify({"error": str(exc)}), 503
    except sqlite3.Error:
        log_exception(logger, "Error fetching databases", error_type="db_read")
        return jsonify({"error": "Failed to fetch databases"}), 500
    return jsonify(payload)
