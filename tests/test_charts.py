from photospec.spectra.types import DistributionRequest
from photospec_web.charts import LoadedSpectrum, build_comparison, chart_payload, svg_polylines
from photospec_web.state import SpectrumSelection


def _spectrum(compound_id: str, name: str, points) -> LoadedSpectrum:
    return LoadedSpectrum(SpectrumSelection(compound_id, "absorption"), {"id": compound_id, "name": name}, points)


def test_duplicate_labels_get_a_suffix() -> None:
    spectra = [
        _spectrum("1", "Perylene", [(400.0, 1.0)]),
        _spectrum("7", "Perylene", [(410.0, 2.0)]),
    ]
    frame, legend = build_comparison(spectra, [])
    assert frame.columns == ("Perylene (absorption)", "Perylene (absorption) #2")
    assert [e["compound_id"] for e in legend] == ["1", "7"]


def test_distributions_follow_spectra_in_column_order() -> None:
    spectra = [_spectrum("1", "Perylene", [(400.0, 1.0), (500.0, 3.0)])]
    distributions = [
        DistributionRequest(kind="gaussian", low_wavelength=400, high_wavelength=500, num_points=3),
        DistributionRequest(kind="blackbody", low_wavelength=400, high_wavelength=500, num_points=2),
    ]
    frame, legend = build_comparison(spectra, distributions, normalize=True)
    assert frame.columns == ("Perylene (absorption)", "Gaussian Distribution 1", "Blackbody Distribution 2")
    assert [e["distribution"] for e in legend] == [False, True, True]
    assert frame.wavelengths == (400.0, 450.0, 500.0)
    assert frame.column("Perylene (absorption)") == (0.0, None, 1.0)

    payload = chart_payload(frame, legend, normalized=True)
    assert payload["columns"] == list(frame.columns)
    assert len(payload["rows"]) == 3


def test_svg_polylines_scale_into_the_viewport() -> None:
    frame, legend = build_comparison([_spectrum("1", "Perylene", [(400.0, 0.0), (600.0, 2.0)])], [])
    chart = svg_polylines(frame, legend, width=200, height=100)
    assert chart["x_min"] == 400.0
    assert chart["x_max"] == 600.0
    assert chart["lines"][0]["points"] == "0.0,100.0 200.0,0.0"
    assert chart["lines"][0]["dashed"] is False


def test_svg_polylines_with_nothing_to_draw() -> None:
    frame, legend = build_comparison([], [])
    chart = svg_polylines(frame, legend)
    assert chart["lines"] == []
