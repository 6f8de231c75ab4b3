"""
Chart data builders for photospec Web.

Loads the selected measured spectra, samples the requested reference
distributions, optionally normalizes each curve on its own, and assembles the
single ComparisonFrame that the chart, the JSON API and the CSV export share.
"""
from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from photospec.spectra.compare import assemble_frame, frame_to_records
from photospec.spectra.dispatch import distribution_label, sample_distribution
from photospec.spectra.normalize import normalize_points
from photospec.spectra.types import ComparisonFrame, DistributionRequest, NamedSeries
from photospec.util.logging import get_logger, series_extra
from photospec_web.compounds import get_compound, get_spectrum
from photospec_web.config import CHART_HEIGHT_PX, CHART_WIDTH_PX, DISTRIBUTION_COLORS, SPECTRUM_COLORS
from photospec_web.formatting import spectrum_label
from photospec_web.state import SpectrumSelection

logger = get_logger(__name__)


@dataclass
class LoadedSpectrum:
    selection: SpectrumSelection
    compound: Dict[str, Any]
    points: List[Tuple[float, float]]

    @property
    def label(self) -> str:
        return spectrum_label(self.compound.get("name"), self.selection.spectrum_type)


def load_selected_spectra(
    con: sqlite3.Connection,
    selections: Sequence[SpectrumSelection],
) -> List[LoadedSpectrum]:
    """
    Fetch compound metadata and data for each selection.

    Selections whose compound is unknown or has no data for the requested
    type are skipped.
    """
    loaded: List[LoadedSpectrum] = []
    for sel in selections:
        try:
            compound = get_compound(con, sel.compound_id)
            points = get_spectrum(con, sel.compound_id, sel.spectrum_type)
        except sqlite3.Error:
            logger.exception(
                "Error loading spectrum %s",
                sel.encode(),
                extra=series_extra(compound_id=sel.compound_id, spectrum_type=sel.spectrum_type),
            )
            continue
        if compound is None or not points:
            logger.debug(
                "Skipping selection %s (no compound or no data)",
                sel.encode(),
                extra=series_extra(compound_id=sel.compound_id, spectrum_type=sel.spectrum_type),
            )
            continue
        loaded.append(LoadedSpectrum(sel, compound, points))
    return loaded


def _unique(name: str, taken: Dict[str, int]) -> str:
    count = taken.get(name, 0) + 1
    taken[name] = count
    return name if count == 1 else f"{name} #{count}"


def build_comparison(
    spectra: Sequence[LoadedSpectrum],
    distributions: Sequence[DistributionRequest],
    *,
    normalize: bool = False,
) -> Tuple[ComparisonFrame, List[Dict[str, Any]]]:
    """
    Assemble measured spectra and distributions into one frame.

    Returns:
        Tuple of (frame, legend) where legend has one entry per frame column
        with its colour and whether it is a reference distribution.
    """
    series: List[NamedSeries] = []
    legend: List[Dict[str, Any]] = []
    taken: Dict[str, int] = {}

    for i, spectrum in enumerate(spectra):
        points = normalize_points(spectrum.points) if normalize else spectrum.points
        name = _unique(spectrum.label, taken)
        series.append(NamedSeries(name, points))
        legend.append(
            {
                "name": name,
                "color": SPECTRUM_COLORS[i % len(SPECTRUM_COLORS)],
                "distribution": False,
                "compound_id": spectrum.selection.compound_id,
                "spectrum_type": spectrum.selection.spectrum_type,
            }
        )

    for i, request in enumerate(distributions):
        curve = sample_distribution(request)
        points = normalize_points(curve) if normalize else curve
        name = _unique(distribution_label(request, i), taken)
        series.append(NamedSeries(name, points))
        legend.append(
            {
                "name": name,
                "color": DISTRIBUTION_COLORS[i % len(DISTRIBUTION_COLORS)],
                "distribution": True,
                "index": i,
            }
        )

    return assemble_frame(series), legend


def chart_payload(frame: ComparisonFrame, legend: Sequence[Dict[str, Any]], *, normalized: bool = False) -> Dict[str, Any]:
    """JSON-ready chart data; absent and non-finite cells are left out of each row."""
    return {
        "columns": list(frame.columns),
        "series": list(legend),
        "normalized": normalized,
        "rows": frame_to_records(frame),
    }


def _finite_range(values: Sequence[Optional[float]]) -> Optional[Tuple[float, float]]:
    finite = [v for v in values if v is not None and math.isfinite(v)]
    if not finite:
        return None
    return min(finite), max(finite)


def svg_polylines(
    frame: ComparisonFrame,
    legend: Sequence[Dict[str, Any]],
    *,
    width: int = CHART_WIDTH_PX,
    height: int = CHART_HEIGHT_PX,
) -> Dict[str, Any]:
    """
    Scale the frame into SVG polyline point strings for the dashboard.

    Returns:
        Dict with "lines" (name, color, dashed, points) and the axis extents.
    """
    x_range = _finite_range(frame.wavelengths)
    all_values = [v for row in frame.rows for v in row.values]
    y_range = _finite_range(all_values)
    if x_range is None or y_range is None:
        return {"lines": [], "x_min": None, "x_max": None, "y_min": None, "y_max": None,
                "width": width, "height": height}

    x_min, x_max = x_range
    y_min, y_max = min(0.0, y_range[0]), y_range[1]
    x_span = (x_max - x_min) or 1.0
    y_span = (y_max - y_min) or 1.0

    lines: List[Dict[str, Any]] = []
    for col, entry in enumerate(legend):
        coords: List[str] = []
        for row in frame.rows:
            v = row.values[col]
            if v is None or not math.isfinite(v):
                continue
            x = (row.wavelength - x_min) / x_span * width
            y = height - (v - y_min) / y_span * height
            coords.append(f"{x:.1f},{y:.1f}")
        lines.append(
            {
                "name": entry["name"],
                "color": entry["color"],
                "dashed": bool(entry.get("distribution")),
                "points": " ".join(coords),
            }
        )

    return {
        "lines": lines,
        "x_min": x_min,
        "x_max": x_max,
        "y_min": y_min,
        "y_max": y_max,
        "width": width,
        "height": height,
    }
