"""
Configuration constants and environment parsing for photospec Web.

All PHOTOSPEC_* environment variables are parsed here and exported as
module-level constants. Blueprints and helpers import from this module rather
than reading os.environ directly.
"""
from __future__ import annotations

import os

from photospec.spectra.distributions import MAX_NUM_POINTS as SAMPLER_MAX_POINTS


def _int_env(name: str, default: int) -> int:
    """Parse an integer from environment, returning default on missing/invalid."""
    val = os.getenv(name)
    if not val:
        return default
    try:
        return max(1, int(float(val)))
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    """Parse a float from environment, returning default on missing/invalid."""
    val = os.getenv(name)
    if not val:
        return default
    try:
        return float(val)
    except Exception:
        return default


# ---------------------------------------------------------------------------
# Data locations
# ---------------------------------------------------------------------------
DB_PATH: str = os.getenv("PHOTOSPEC_DB", os.path.join("database", "photochemcad.sqlite"))
"""Default SQLite compound database used when --db is not given."""

FILES_DIR: str = os.getenv("PHOTOSPEC_FILES_DIR", "database")
"""Directory served under /database-files/ (structure images, notes)."""


# ---------------------------------------------------------------------------
# Compound search
# ---------------------------------------------------------------------------
SEARCH_LIMIT: int = _int_env("PHOTOSPEC_SEARCH_LIMIT", 50)
"""Maximum compounds returned by a search."""

BROWSE_LIMIT: int = _int_env("PHOTOSPEC_BROWSE_LIMIT", 15)
"""Default number of compounds listed when browsing a database."""


# ---------------------------------------------------------------------------
# Distributions
# ---------------------------------------------------------------------------
DEFAULT_NUM_POINTS: int = _int_env("PHOTOSPEC_NUM_POINTS", 1000)
"""Samples per generated distribution curve."""

MAX_NUM_POINTS: int = min(_int_env("PHOTOSPEC_MAX_NUM_POINTS", SAMPLER_MAX_POINTS), SAMPLER_MAX_POINTS)
"""Upper bound on client-requested sample counts (never above the sampler cap)."""


# ---------------------------------------------------------------------------
# Chart rendering
# ---------------------------------------------------------------------------
CHART_WIDTH_PX: int = _int_env("PHOTOSPEC_CHART_WIDTH_PX", 900)
CHART_HEIGHT_PX: int = _int_env("PHOTOSPEC_CHART_HEIGHT_PX", 400)

SPECTRUM_COLORS = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#06b6d4",
    "#f97316",
    "#84cc16",
)
"""Line colours for measured spectra, cycled in selection order."""

DISTRIBUTION_COLORS = (
    "#dc2626",
    "#ea580c",
    "#d97706",
)
"""Dashed line colours for reference distributions."""


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------
SLOW_REQUEST_MS: float = _float_env("PHOTOSPEC_SLOW_REQUEST_MS", 500.0)
"""Requests slower than this are logged at debug level."""

ERROR_RING_MAX: int = _int_env("PHOTOSPEC_ERROR_RING_MAX", 100)
"""Number of recent exceptions kept for /api/debug/errors."""


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
EXPORT_FILENAME = "spectrum_comparison.csv"
"""Download name for /export/comparison.csv."""
