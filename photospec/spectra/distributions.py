"""Closed-form reference distributions sampled over a wavelength range.

Every sampler returns ``num_points`` points evenly spaced over
``[low_wavelength, high_wavelength]`` (both ends included) and rescales the
curve so its largest finite intensity is exactly 1.0. Floating-point hazards
(overflowing exponents, zero widths) never raise; the affected samples come
out as inf/NaN and are left for the normalizer to exclude.
"""

from __future__ import annotations

import math
from typing import List

import numpy as np

from photospec.spectra.types import SamplePoint
from photospec.util.logging import get_logger, series_extra
from photospec.util.math import BOLTZMANN_K, NM_TO_M, PLANCK_H, SPEED_OF_LIGHT_C

DEFAULT_NUM_POINTS = 1000
MAX_NUM_POINTS = 20000

logger = get_logger(__name__)


def wavelength_axis(low_wavelength: float, high_wavelength: float, num_points: int = DEFAULT_NUM_POINTS) -> np.ndarray:
    """Evenly spaced wavelengths in nm, inclusive of both bounds.

    Degenerate bounds (``low >= high``) and ``num_points == 1`` collapse to a
    single point at ``low``; non-finite bounds or ``num_points <= 0`` give an
    empty axis. Counts above MAX_NUM_POINTS are capped.
    """
    n = min(int(num_points), MAX_NUM_POINTS)
    low = float(low_wavelength)
    high = float(high_wavelength)
    if n <= 0 or not (math.isfinite(low) and math.isfinite(high)):
        return np.zeros(0, dtype=np.float64)
    if n == 1 or low >= high:
        return np.array([low], dtype=np.float64)
    return np.linspace(low, high, num=n, dtype=np.float64)


def peak_rescale(intensities: np.ndarray) -> np.ndarray:
    """Divide by the largest finite intensity; unchanged if that peak is <= 0 or absent."""
    arr = np.asarray(intensities, dtype=np.float64)
    finite = np.isfinite(arr)
    if not finite.any():
        return arr
    peak = float(arr[finite].max())
    if peak <= 0.0:
        return arr
    return arr / peak


def _to_points(axis: np.ndarray, intensities: np.ndarray, label: str) -> List[SamplePoint]:
    bad = int(np.count_nonzero(~np.isfinite(intensities)))
    if bad:
        logger.debug("%s curve has %d non-finite samples of %d", label, bad, intensities.size, extra=series_extra(kind=label))
    return [SamplePoint(float(w), float(v)) for w, v in zip(axis, intensities)]


def planck_radiance(wavelength_nm: np.ndarray, temperature: float) -> np.ndarray:
    """Planck spectral radiance B(lambda, T) in W / (sr * m^3) for wavelengths in nm."""
    lam = np.asarray(wavelength_nm, dtype=np.float64) * NM_TO_M
    with np.errstate(over="ignore", divide="ignore", invalid="ignore", under="ignore"):
        exponent = (PLANCK_H * SPEED_OF_LIGHT_C) / (lam * BOLTZMANN_K * float(temperature))
        numerator = 2.0 * PLANCK_H * SPEED_OF_LIGHT_C ** 2
        denominator = np.power(lam, 5) * (np.exp(exponent) - 1.0)
        return numerator / denominator


def gaussian_profile(wavelength_nm: np.ndarray, peak_wavelength: float, standard_deviation: float, multiplier: float = 1.0) -> np.ndarray:
    z_num = np.asarray(wavelength_nm, dtype=np.float64) - float(peak_wavelength)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore", under="ignore"):
        z = z_num / float(standard_deviation)
        return float(multiplier) * np.exp(-(z ** 2) / 2.0)


def lorentzian_profile(wavelength_nm: np.ndarray, peak_wavelength: float, fwhm: float, multiplier: float = 1.0) -> np.ndarray:
    gamma = float(fwhm) / 2.0
    offset = np.asarray(wavelength_nm, dtype=np.float64) - float(peak_wavelength)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore", under="ignore"):
        return float(multiplier) * gamma ** 2 / (math.pi * (offset ** 2 + gamma ** 2))


def blackbody_spectrum(
    low_wavelength: float,
    high_wavelength: float,
    temperature: float,
    num_points: int = DEFAULT_NUM_POINTS,
) -> List[SamplePoint]:
    """Blackbody emission curve for ``temperature`` kelvin, peak-rescaled to 1."""
    axis = wavelength_axis(low_wavelength, high_wavelength, num_points)
    if axis.size == 0:
        return []
    intensities = peak_rescale(planck_radiance(axis, temperature))
    return _to_points(axis, intensities, "blackbody")


def gaussian_spectrum(
    low_wavelength: float,
    high_wavelength: float,
    peak_wavelength: float,
    standard_deviation: float,
    multiplier: float = 1.0,
    num_points: int = DEFAULT_NUM_POINTS,
) -> List[SamplePoint]:
    """multiplier * exp(-(lambda - peak)^2 / (2 sigma^2)), peak-rescaled to 1."""
    axis = wavelength_axis(low_wavelength, high_wavelength, num_points)
    if axis.size == 0:
        return []
    raw = gaussian_profile(axis, peak_wavelength, standard_deviation, multiplier)
    return _to_points(axis, peak_rescale(raw), "gaussian")


def lorentzian_spectrum(
    low_wavelength: float,
    high_wavelength: float,
    peak_wavelength: float,
    fwhm: float,
    multiplier: float = 1.0,
    num_points: int = DEFAULT_NUM_POINTS,
) -> List[SamplePoint]:
    """multiplier * gamma^2 / (pi * ((lambda - peak)^2 + gamma^2)) with gamma = fwhm / 2."""
    axis = wavelength_axis(low_wavelength, high_wavelength, num_points)
    if axis.size == 0:
        return []
    raw = lorentzian_profile(axis, peak_wavelength, fwhm, multiplier)
    return _to_points(axis, peak_rescale(raw), "lorentzian")
