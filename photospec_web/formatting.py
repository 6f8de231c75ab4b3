"""
Display formatting helpers for photospec Web.

Provides functions for formatting wavelengths, intensities and series labels
for human-readable display in templates.
"""
from __future__ import annotations

import math
from typing import Any, Optional


def spectrum_label(compound_name: Optional[str], spectrum_type: str) -> str:
    """Series name for a measured spectrum, e.g. "Anthracene (absorption)"."""
    return f"{compound_name or 'Unknown compound'} ({spectrum_type})"


def spectrum_type_label(spectrum_type: Optional[str]) -> str:
    if not spectrum_type:
        return "—"
    return spectrum_type[:1].upper() + spectrum_type[1:]


def format_wavelength_label(wavelength_nm: Optional[float]) -> str:
    """
    Format a wavelength for axis labels and tooltips (e.g., "550 nm").

    Args:
        wavelength_nm: Wavelength in nanometers.

    Returns:
        Formatted string, or "—" if missing/invalid.
    """
    if wavelength_nm is None:
        return "—"
    try:
        wl = float(wavelength_nm)
    except (ValueError, TypeError):
        return "—"
    if not math.isfinite(wl):
        return "—"
    if wl.is_integer():
        return f"{wl:.0f} nm"
    return f"{wl:.1f} nm"


def format_value(value: Any, *, normalized: bool = False) -> str:
    """Tooltip value: 3 decimals on the normalized scale, 2 otherwise."""
    if value is None:
        return "—"
    try:
        v = float(value)
    except (ValueError, TypeError):
        return "—"
    if not math.isfinite(v):
        return "—"
    return f"{v:.3f}" if normalized else f"{v:.2f}"

