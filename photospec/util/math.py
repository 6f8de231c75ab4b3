"""Numeric helpers and physical constants shared across the spectra core."""

from __future__ import annotations

import math
from typing import Any, Optional

# CODATA 2018 exact values
PLANCK_H = 6.62607015e-34  # J*s
SPEED_OF_LIGHT_C = 299792458.0  # m/s
BOLTZMANN_K = 1.380649e-23  # J/K

NM_TO_M = 1e-9


def coerce_float(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None if it is missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def finite_or_none(value: Any) -> Optional[float]:
    """Pass finite numbers through; map None/NaN/inf to None."""
    if value is None:
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None
