import math

import numpy as np

from photospec.spectra.distributions import (
    blackbody_spectrum,
    gaussian_spectrum,
    lorentzian_profile,
    lorentzian_spectrum,
    peak_rescale,
    wavelength_axis,
)


def _wavelengths(points) -> np.ndarray:
    return np.array([p.wavelength for p in points], dtype=np.float64)


def _intensities(points) -> np.ndarray:
    return np.array([p.intensity for p in points], dtype=np.float64)


def test_samplers_span_both_bounds_with_requested_count() -> None:
    curves = [
        blackbody_spectrum(300, 900, 5000, num_points=250),
        gaussian_spectrum(300, 900, 500, 40, num_points=250),
        lorentzian_spectrum(300, 900, 500, 30, num_points=250),
    ]
    for curve in curves:
        wl = _wavelengths(curve)
        assert len(curve) == 250
        assert wl[0] == 300.0
        assert wl[-1] == 900.0
        assert np.all(np.diff(wl) > 0)


def test_default_point_count_is_one_thousand() -> None:
    assert len(gaussian_spectrum(200, 800, 300, 20)) == 1000


def test_samplers_are_peak_rescaled_to_one() -> None:
    curves = [
        blackbody_spectrum(200, 2000, 3000, num_points=400),
        gaussian_spectrum(200, 800, 450, 15, multiplier=7.5, num_points=400),
        lorentzian_spectrum(200, 800, 450, 15, multiplier=0.2, num_points=400),
    ]
    for curve in curves:
        values = _intensities(curve)
        assert np.all(np.isfinite(values))
        assert values.max() == 1.0


def test_gaussian_hits_one_on_sampled_peak() -> None:
    curve = gaussian_spectrum(200, 800, 500, 25, multiplier=3, num_points=601)
    wl = _wavelengths(curve)
    idx = int(np.argmax(_intensities(curve)))
    assert wl[idx] == 500.0
    assert curve[idx].intensity == 1.0


def test_gaussian_peak_is_nearest_sample_to_requested_wavelength() -> None:
    curve = gaussian_spectrum(200, 800, 550, 30, multiplier=2, num_points=1000)
    wl = _wavelengths(curve)
    values = _intensities(curve)
    assert int(np.argmax(values)) == int(np.argmin(np.abs(wl - 550.0)))
    assert values.max() == 1.0


def test_lorentzian_raw_peak_height_is_multiplier_over_pi() -> None:
    raw = lorentzian_profile(np.array([500.0]), 500.0, 30.0, 2.0)
    assert math.isclose(float(raw[0]), 2.0 / math.pi, rel_tol=1e-12)

    curve = lorentzian_spectrum(400, 600, 500, 30, multiplier=2, num_points=201)
    idx = int(np.argmax(_intensities(curve)))
    assert curve[idx].wavelength == 500.0
    assert curve[idx].intensity == 1.0


def test_blackbody_solar_temperature_peaks_in_blue_green() -> None:
    curve = blackbody_spectrum(400, 700, 5776, num_points=5)
    wl = _wavelengths(curve)
    values = _intensities(curve)
    assert wl.tolist() == [400.0, 475.0, 550.0, 625.0, 700.0]
    assert np.all(np.isfinite(values))
    assert values.max() == 1.0
    assert wl[int(np.argmax(values))] in (475.0, 550.0)


def test_blackbody_zero_wavelength_sample_is_non_finite_without_raising() -> None:
    curve = blackbody_spectrum(0, 100, 5776, num_points=11)
    values = _intensities(curve)
    assert len(curve) == 11
    assert not math.isfinite(curve[0].intensity)
    assert values[np.isfinite(values)].max() == 1.0


def test_zero_temperature_and_zero_width_do_not_raise() -> None:
    cold = blackbody_spectrum(400, 700, 0, num_points=4)
    assert [p.intensity for p in cold] == [0.0, 0.0, 0.0, 0.0]

    spike = gaussian_spectrum(400, 600, 500, 0, num_points=201)
    assert len(spike) == 201


def test_degenerate_bounds_and_counts() -> None:
    single = gaussian_spectrum(500, 500, 500, 10, num_points=50)
    assert [p.wavelength for p in single] == [500.0]

    reversed_bounds = lorentzian_spectrum(600, 400, 500, 10, num_points=50)
    assert [p.wavelength for p in reversed_bounds] == [600.0]

    one = blackbody_spectrum(400, 700, 5776, num_points=1)
    assert [p.wavelength for p in one] == [400.0]
    assert one[0].intensity == 1.0

    assert gaussian_spectrum(400, 700, 500, 10, num_points=0) == []
    assert wavelength_axis(float("nan"), 800, 10).size == 0


def test_peak_rescale_skips_non_positive_or_absent_peaks() -> None:
    scaled = peak_rescale(np.array([2.0, 4.0, np.inf]))
    assert scaled[0] == 0.5
    assert scaled[1] == 1.0
    assert np.isinf(scaled[2])

    negative = np.array([-3.0, -1.0])
    assert peak_rescale(negative).tolist() == [-3.0, -1.0]

    nothing = peak_rescale(np.array([np.nan, np.nan]))
    assert np.all(np.isnan(nothing))
