"""
Spectrum data API blueprint for photospec Web.
"""
from __future__ import annotations

import sqlite3

from flask import Blueprint, jsonify, request

from photospec.util.logging import get_logger, log_exception
from photospec_web.compounds import SPECTRUM_TYPES, get_spectrum_rows
from photospec_web.db import get_con

bp = Blueprint("api_spectra", __name__)

logger = get_logger(__name__)


@bp.get("/api/spectra")
def api_spectra():
    """Absorption or emission rows for one compound (?compound_id=&type=)."""
    compound_id = request.args.get("compound_id") or request.args.get("compoundId")
    spectrum_type = request.args.get("type")

    if not compound_id or not spectrum_type:
        return jsonify({"error": "Missing compound_id/compoundId or type parameter"}), 400
    if spectrum_type not in SPECTRUM_TYPES:
        return jsonify({"error": 'Invalid type parameter. Use "absorption" or "emission"'}), 400

    try:
        rows = get_spectrum_rows(get_con(), compound_id, spectrum_type)
    except RuntimeError as exc:
        return jsonify({"error": str(exc)}), 503
    except sqlite3.Error:
        log_exception(
            logger,
            "Error fetching spectra data",
            error_type="db_read",
            compound_id=compound_id,
            spectrum_type=spectrum_type,
        )
        return jsonify({"error": "Failed to fetch spectra data"}), 500
    return jsonify(rows)
