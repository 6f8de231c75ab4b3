"""
Distribution and comparison API blueprint for photospec Web.

Provides endpoints that sample one reference distribution and that assemble
the full comparison frame described by the dashboard query string.
"""
from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict

from flask import Blueprint, abort, jsonify, request

from photospec.spectra.dispatch import distribution_label, resolve_request, sample_distribution
from photospec.spectra.normalize import normalize_points
from photospec.spectra.types import DistributionKind
from photospec_web.charts import build_comparison, chart_payload, load_selected_spectra
from photospec_web.db import get_con_optional
from photospec_web.state import (
    normalize_requested,
    parse_distribution_requests,
    parse_spectrum_selections,
    request_from_args,
)

bp = Blueprint("api_distributions", __name__)


def _resolved_params(req) -> Dict[str, Any]:
    params = asdict(resolve_request(req))
    kind = params.get("kind")
    if isinstance(kind, DistributionKind):
        params["kind"] = kind.value
    return params


# ---------------------------------------------------------------------------
# Single distribution
# ---------------------------------------------------------------------------


@bp.get("/api/distribution")
def api_distribution():
    """Sample one distribution from ?type=&lowWavelength=&... (normalize=1 optional)."""
    req = request_from_args(request.args)
    if req is None:
        abort(400, description="Missing type parameter")

    points = sample_distribution(req)
    normalized = normalize_requested(request.args)
    if normalized:
        points = normalize_points(points)

    return jsonify(
        {
            "label": distribution_label(req, 0),
            "params": _resolved_params(req),
            "normalized": normalized,
            "points": [
                {
                    "wavelength": p.wavelength,
                    "intensity": p.intensity if math.isfinite(p.intensity) else None,
                }
                for p in points
            ],
        }
    )


# ---------------------------------------------------------------------------
# Comparison frame
# ---------------------------------------------------------------------------


@bp.get("/api/comparison")
def api_comparison():
    """Assembled frame for the spectrum<N>/dist<N>* selection in the query string."""
    selections = parse_spectrum_selections(request.args)
    distributions = parse_distribution_requests(request.args)
    normalized = normalize_requested(request.args)

    spectra = []
    if selections:
        con = get_con_optional()
        if con is None:
            return jsonify({"error": "database connection unavailable"}), 503
        spectra = load_selected_spectra(con, selections)

    frame, legend = build_comparison(spectra, distributions, normalize=normalized)
    return jsonify(chart_payload(frame, legend, normalized=normalized))
