"""Per-curve min/max rescaling to the unit interval.

Each curve is normalized against its own finite minimum and maximum; there is
no shared range across series. Non-finite or missing samples take no part in
the min/max search and come out as ``None``. A curve with no spread (constant,
single point, or nothing finite) maps every output to 0.5.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from photospec.spectra.types import SamplePoint
from photospec.util.math import finite_or_none

FLAT_VALUE = 0.5

PointLike = Union[SamplePoint, Tuple[float, Any]]


def normalize_values(values: Iterable[Any]) -> List[Optional[float]]:
    """Rescale ``values`` to [0, 1] via ``(v - min) / (max - min)``."""
    cleaned = [finite_or_none(v) for v in values]
    finite = [v for v in cleaned if v is not None]
    if not finite:
        return [FLAT_VALUE] * len(cleaned)

    lo = min(finite)
    hi = max(finite)
    if hi == lo:
        return [FLAT_VALUE if v is not None else None for v in cleaned]
    span = hi - lo
    if math.isfinite(span):
        return [(v - lo) / span if v is not None else None for v in cleaned]
    # range wider than the largest double: scale halves, which cannot overflow
    half_lo = lo / 2
    half_span = hi / 2 - half_lo
    return [(v / 2 - half_lo) / half_span if v is not None else None for v in cleaned]


def _split(point: PointLike) -> Tuple[float, Any]:
    if isinstance(point, SamplePoint):
        return point.wavelength, point.intensity
    return point[0], point[1]


def normalize_points(points: Sequence[PointLike]) -> List[SamplePoint]:
    """Normalize the intensities of a curve, dropping samples that come out absent."""
    pairs = [_split(p) for p in points]
    scaled = normalize_values(value for _, value in pairs)
    return [
        SamplePoint(float(wavelength), value)
        for (wavelength, _), value in zip(pairs, scaled)
        if value is not None
    ]
