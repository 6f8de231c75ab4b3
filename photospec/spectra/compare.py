"""Join measured spectra and synthetic curves onto one wavelength axis.

Rows are keyed by the union of every distinct wavelength in the inputs, using
exact float equality. No interpolation or binning is done: a series only has a
value in rows whose wavelength it sampled exactly, every other cell is None.
The chart, tooltips and CSV export all iterate the same frame.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Set

from photospec.spectra.types import ComparisonFrame, FrameRow, NamedSeries, SamplePoint


def _series_lookup(series: NamedSeries) -> Dict[float, Optional[float]]:
    lookup: Dict[float, Optional[float]] = {}
    for point in series.points:
        if isinstance(point, SamplePoint):
            wavelength, value = point.wavelength, point.intensity
        else:
            wavelength, value = point[0], point[1]
        try:
            wl = float(wavelength)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(wl):
            continue
        # first sample at a wavelength wins
        if wl not in lookup:
            lookup[wl] = None if value is None else float(value)
    return lookup


def assemble_frame(series: Sequence[NamedSeries]) -> ComparisonFrame:
    """Build the comparison frame for ``series`` (column order follows input order)."""
    lookups = [_series_lookup(s) for s in series]

    union: Set[float] = set()
    for lookup in lookups:
        union.update(lookup.keys())

    rows = []
    for wavelength in sorted(union):
        rows.append(
            FrameRow(
                wavelength=wavelength,
                values=tuple(lookup.get(wavelength) for lookup in lookups),
            )
        )
    return ComparisonFrame(columns=tuple(s.name for s in series), rows=tuple(rows))


def frame_to_records(frame: ComparisonFrame) -> List[Dict[str, Any]]:
    """One dict per row: ``wavelength`` plus a key per present, finite cell."""
    records: List[Dict[str, Any]] = []
    for row in frame.rows:
        record: Dict[str, Any] = {"wavelength": row.wavelength}
        for name, value in zip(frame.columns, row.values):
            if value is not None and math.isfinite(value):
                record[name] = value
        records.append(record)
    return records
