from photospec.spectra.compare import assemble_frame, frame_to_records
from photospec.spectra.types import NamedSeries, SamplePoint


def test_union_of_wavelengths_with_absent_cells() -> None:
    frame = assemble_frame(
        [
            NamedSeries("A", [(400.0, 1.0), (500.0, 2.0)]),
            NamedSeries("B", [SamplePoint(500.0, 5.0), SamplePoint(600.0, 6.0)]),
        ]
    )
    assert frame.columns == ("A", "B")
    assert frame.wavelengths == (400.0, 500.0, 600.0)
    assert frame.column("A") == (1.0, 2.0, None)
    assert frame.column("B") == (None, 5.0, 6.0)


def test_nearby_wavelengths_are_not_merged() -> None:
    frame = assemble_frame(
        [
            NamedSeries("A", [(500.0, 1.0)]),
            NamedSeries("B", [(500.0000001, 2.0)]),
        ]
    )
    assert len(frame.rows) == 2
    assert frame.rows[0].values == (1.0, None)
    assert frame.rows[1].values == (None, 2.0)


def test_rows_are_sorted_and_first_duplicate_wins() -> None:
    frame = assemble_frame([NamedSeries("A", [(600.0, 3.0), (400.0, 1.0), (600.0, 9.0)])])
    assert frame.wavelengths == (400.0, 600.0)
    assert frame.column("A") == (1.0, 3.0)


def test_non_finite_wavelengths_are_skipped() -> None:
    frame = assemble_frame([NamedSeries("A", [(float("nan"), 1.0), (450.0, 2.0), (float("inf"), 3.0)])])
    assert frame.wavelengths == (450.0,)


def test_empty_input_gives_empty_frame() -> None:
    frame = assemble_frame([])
    assert frame.columns == ()
    assert frame.rows == ()


def test_records_omit_absent_and_non_finite_cells() -> None:
    frame = assemble_frame(
        [
            NamedSeries("A", [(400.0, 1.0), (500.0, float("nan"))]),
            NamedSeries("B", [(500.0, 5.0)]),
        ]
    )
    assert frame_to_records(frame) == [
        {"wavelength": 400.0, "A": 1.0},
        {"wavelength": 500.0, "B": 5.0},
    ]
