"""
HTML view routes blueprint for photospec Web.

Provides the dashboard page, the redirects that add/remove selections in the
query string, and the CSV export of the current comparison.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from flask import Blueprint, Response, redirect, render_template, request

from photospec.io.export import comparison_csv
from photospec.util.logging import get_logger, log_exception
from photospec_web.charts import build_comparison, load_selected_spectra, svg_polylines
from photospec_web.compounds import SPECTRUM_TYPES, list_databases, search_compounds
from photospec_web.config import CHART_HEIGHT_PX, CHART_WIDTH_PX, EXPORT_FILENAME
from photospec_web.db import db_state, db_waiting_context, get_con
from photospec_web.formatting import format_value, format_wavelength_label, spectrum_type_label
from photospec_web.state import (
    FIELD_KEYS,
    Pairs,
    add_distribution,
    add_spectrum,
    as_pairs,
    build_query,
    normalize_requested,
    parse_distribution_entries,
    parse_distribution_requests,
    parse_spectrum_selections,
    remove_distribution,
    remove_spectrum,
    request_from_args,
    set_flag,
)

bp = Blueprint("views", __name__)

logger = get_logger(__name__)

# transient keys that never belong in the shareable state
_SEARCH_KEYS = {"q"}
_ACTION_KEYS = {"compound_id", "type"}
_FORM_KEYS = {"type"} | {suffix[:1].lower() + suffix[1:] for suffix in FIELD_KEYS.values()}


def _state_pairs(drop=frozenset()) -> Pairs:
    return [(k, v) for k, v in as_pairs(request.args) if k not in drop]


def _href(pairs: Pairs) -> str:
    query = build_query(pairs)
    return f"/?{query}" if query else "/"


def _comparison_for_request():
    """Loaded spectra + distributions for the current query string."""
    selections = parse_spectrum_selections(request.args)
    distributions = parse_distribution_requests(request.args)
    normalized = normalize_requested(request.args)

    spectra = []
    state, message = db_state()
    if selections and state == "ready":
        spectra = load_selected_spectra(get_con(), selections)
    frame, legend = build_comparison(spectra, distributions, normalize=normalized)
    return spectra, distributions, normalized, frame, legend, (state, message)


# ---------------------------------------------------------------------------
# Dashboard (/)
# ---------------------------------------------------------------------------


@bp.route("/")
def dashboard():
    """Main dashboard page."""
    spectra, distributions, normalized, frame, legend, (state, state_message) = _comparison_for_request()
    pairs = _state_pairs(drop=_SEARCH_KEYS)
    query = (request.args.get("q") or "").strip()

    context: Dict[str, Any] = db_waiting_context(state, state_message)

    search_results: List[Dict[str, Any]] = []
    databases: List[Dict[str, Any]] = []
    if state == "ready":
        try:
            con = get_con()
            databases = list_databases(con)
            if query:
                search_results = search_compounds(con, query)
        except sqlite3.Error:
            log_exception(logger, "Error querying compounds for dashboard", error_type="db_read")

    for row in search_results:
        row["add_links"] = [
            {
                "type": spectrum_type,
                "label": spectrum_type_label(spectrum_type),
                "href": _href(add_spectrum(pairs, row["id"], spectrum_type)),
            }
            for spectrum_type in SPECTRUM_TYPES
            if str(row.get(f"has_{spectrum_type}_data")) == "1"
        ]

    selected = [
        {
            "label": s.label,
            "compound": s.compound,
            "type_label": spectrum_type_label(s.selection.spectrum_type),
            "remove_href": _href(remove_spectrum(pairs, s.selection.compound_id, s.selection.spectrum_type)),
        }
        for s in spectra
    ]

    dist_entries = [entry for entry in legend if entry.get("distribution")]
    for entry, (idx, _) in zip(dist_entries, parse_distribution_entries(pairs)):
        entry["remove_href"] = _href(remove_distribution(pairs, idx))

    tooltip_rows = [
        {
            "wavelength": format_wavelength_label(row.wavelength),
            "values": [format_value(v, normalized=normalized) for v in row.values],
        }
        for row in frame.rows
    ]

    context.update(
        {
            "query": query,
            "search_results": search_results,
            "databases": databases,
            "selected": selected,
            "distributions": dist_entries,
            "distribution_count": len(distributions),
            "legend": legend,
            "chart": svg_polylines(frame, legend, width=CHART_WIDTH_PX, height=CHART_HEIGHT_PX),
            "columns": list(frame.columns),
            "tooltip_rows": tooltip_rows,
            "row_count": len(frame.rows),
            "normalized": normalized,
            "normalize_href": _href(set_flag(pairs, "normalize", not normalized)),
            "export_href": "/export/comparison.csv" + (f"?{build_query(pairs)}" if pairs else ""),
            "share_url": request.host_url.rstrip("/") + _href(pairs),
            "state_pairs": pairs,
        }
    )
    return render_template("dashboard.html", **context)


# ---------------------------------------------------------------------------
# Selection redirects
# ---------------------------------------------------------------------------


@bp.get("/add")
def add_selection():
    """Add ?compound_id=&type= to the state carried in the other args."""
    compound_id = (request.args.get("compound_id") or "").strip()
    spectrum_type = (request.args.get("type") or "").strip()
    pairs = _state_pairs(drop=_SEARCH_KEYS | _ACTION_KEYS)
    if compound_id and spectrum_type in SPECTRUM_TYPES:
        pairs = add_spectrum(pairs, compound_id, spectrum_type)
    return redirect(_href(pairs))


@bp.get("/remove")
def remove_selection():
    compound_id = (request.args.get("compound_id") or "").strip()
    spectrum_type = (request.args.get("type") or "").strip()
    pairs = _state_pairs(drop=_SEARCH_KEYS | _ACTION_KEYS)
    if compound_id and spectrum_type:
        pairs = remove_spectrum(pairs, compound_id, spectrum_type)
    return redirect(_href(pairs))


@bp.get("/distributions/add")
def add_distribution_view():
    """Append the submitted distribution form (type, lowWavelength, ...) to the state."""
    req = request_from_args(request.args)
    pairs = _state_pairs(drop=_SEARCH_KEYS | _FORM_KEYS)
    if req is not None:
        pairs = add_distribution(pairs, req)
    return redirect(_href(pairs))


# ---------------------------------------------------------------------------
# CSV export (/export/comparison.csv)
# ---------------------------------------------------------------------------


@bp.get("/export/comparison.csv")
def export_csv():
    """Export the current comparison frame as CSV."""
    _, _, _, frame, _, _ = _comparison_for_request()
    return Response(
        comparison_csv(frame),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
