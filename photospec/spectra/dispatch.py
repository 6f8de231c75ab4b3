"""Route distribution requests to their sampler, filling parameter defaults.

Parameters arrive from form fields and query strings, so anything missing or
non-numeric is replaced by its default instead of raising. An unknown kind
produces an empty curve.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List

from photospec.spectra.distributions import (
    DEFAULT_NUM_POINTS,
    MAX_NUM_POINTS,
    blackbody_spectrum,
    gaussian_spectrum,
    lorentzian_spectrum,
)
from photospec.spectra.types import DistributionKind, DistributionRequest, SamplePoint
from photospec.util.logging import get_logger
from photospec.util.math import coerce_float

logger = get_logger(__name__)

DEFAULTS: Dict[str, float] = {
    "low_wavelength": 200.0,
    "high_wavelength": 800.0,
    "temperature_kelvin": 5776.0,
    "peak_wavelength": 300.0,
    "standard_deviation": 20.0,
    "gaussian_multiplier": 1.0,
    "lorentzian_peak_wavelength": 300.0,
    "fwhm": 20.0,
    "lorentzian_multiplier": 1.0,
}


def _resolve_num_points(value: Any) -> int:
    parsed = coerce_float(value)
    if parsed is None:
        return DEFAULT_NUM_POINTS
    return max(0, min(MAX_NUM_POINTS, int(parsed)))


def resolve_request(request: DistributionRequest) -> DistributionRequest:
    """Return a copy of ``request`` with every absent or non-numeric field defaulted."""
    resolved: Dict[str, Any] = {}
    for name, default in DEFAULTS.items():
        value = coerce_float(getattr(request, name))
        resolved[name] = default if value is None else value
    resolved["num_points"] = _resolve_num_points(request.num_points)
    kind = DistributionKind.parse(request.kind)
    resolved["kind"] = kind if kind is not None else request.kind
    return replace(request, **resolved)


def sample_distribution(request: DistributionRequest) -> List[SamplePoint]:
    """Sample the curve described by ``request``; unknown kinds give ``[]``."""
    req = resolve_request(request)
    kind = req.kind

    if kind is DistributionKind.BLACKBODY:
        return blackbody_spectrum(
            req.low_wavelength,
            req.high_wavelength,
            req.temperature_kelvin,
            num_points=req.num_points,
        )
    if kind is DistributionKind.GAUSSIAN:
        return gaussian_spectrum(
            req.low_wavelength,
            req.high_wavelength,
            req.peak_wavelength,
            req.standard_deviation,
            multiplier=req.gaussian_multiplier,
            num_points=req.num_points,
        )
    if kind is DistributionKind.LORENTZIAN:
        return lorentzian_spectrum(
            req.low_wavelength,
            req.high_wavelength,
            req.lorentzian_peak_wavelength,
            req.fwhm,
            multiplier=req.lorentzian_multiplier,
            num_points=req.num_points,
        )

    logger.debug("Unknown distribution kind %r; returning empty curve", request.kind)
    return []


def distribution_label(request: DistributionRequest, index: int) -> str:
    """Display name such as ``"Gaussian Distribution 2"`` for the ``index``-th request."""
    kind = DistributionKind.parse(request.kind)
    name = kind.value if kind is not None else str(request.kind or "unknown")
    return f"{name[:1].upper()}{name[1:]} Distribution {index + 1}"
