import sqlite3
from urllib.parse import parse_qsl, urlsplit

from photospec_web import create_app
from photospec_web.schema import ensure_schema, load_compound

SELECTION = "spectrum0=1:absorption&spectrum1=2:absorption"


def _make_db(path) -> None:
    con = sqlite3.connect(str(path))
    try:
        ensure_schema(con)
        load_compound(
            con,
            {"id": "1", "name": "Anthracene", "database_name": "PhotochemCAD", "category_name": "Aromatic"},
            absorption=[(400.0, 10.0), (500.0, 30.0)],
            emission=[(450.0, 0.2), (500.0, 1.0)],
        )
        load_compound(
            con,
            {"id": "2", "name": "Benzene", "database_name": "PhotochemCAD", "category_name": "Aromatic"},
            absorption=[(500.0, 5.0), (600.0, 15.0)],
        )
        load_compound(con, {"id": "3", "name": "Empty", "database_name": "PhotochemCAD"})
    finally:
        con.close()


def _make_client(tmp_path):
    db_path = tmp_path / "photochemcad.sqlite"
    _make_db(db_path)
    files_dir = tmp_path / "files"
    files_dir.mkdir()
    app = create_app(str(db_path), files_dir=str(files_dir))
    return app, app.test_client()


def _query(location: str) -> dict:
    return dict(parse_qsl(urlsplit(location).query))


def test_compound_search_lists_only_compounds_with_data(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get("/api/compounds")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.get_json()] == ["Anthracene", "Benzene"]

    resp = client.get("/api/compounds?q=benz")
    assert [c["name"] for c in resp.get_json()] == ["Benzene"]

    resp = client.get("/api/compounds?q=2")
    assert [c["id"] for c in resp.get_json()] == ["2"]


def test_database_browsing(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    assert client.get("/api/databases").get_json() == [{"name": "PhotochemCAD", "compound_count": 2}]

    rows = client.get("/api/databases?database=PhotochemCAD&limit=1").get_json()
    assert [r["name"] for r in rows] == ["Anthracene"]

    rows = client.get("/api/databases?database=PhotochemCAD&q=benz").get_json()
    assert [r["name"] for r in rows] == ["Benzene"]


def test_spectra_endpoint_validates_parameters(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get("/api/spectra?type=absorption")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing compound_id/compoundId or type parameter"

    resp = client.get("/api/spectra?compound_id=1&type=fluorescence")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == 'Invalid type parameter. Use "absorption" or "emission"'

    rows = client.get("/api/spectra?compound_id=1&type=absorption").get_json()
    assert [(r["wavelength"], r["coefficient"]) for r in rows] == [(400.0, 10.0), (500.0, 30.0)]

    rows = client.get("/api/spectra?compoundId=1&type=emission").get_json()
    assert [(r["wavelength"], r["normalized"]) for r in rows] == [(450.0, 0.2), (500.0, 1.0)]


def test_distribution_endpoint(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get(
        "/api/distribution?type=gaussian&lowWavelength=400&highWavelength=600"
        "&peakWavelength=500&standardDeviation=20&points=201"
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["label"] == "Gaussian Distribution 1"
    assert body["params"]["kind"] == "gaussian"
    assert body["params"]["peak_wavelength"] == 500.0
    assert len(body["points"]) == 201
    assert max(p["intensity"] for p in body["points"]) == 1.0

    normalized = client.get("/api/distribution?type=lorentzian&points=50&normalize=1").get_json()
    assert normalized["normalized"] is True
    assert min(p["intensity"] for p in normalized["points"]) == 0.0

    assert client.get("/api/distribution?type=voigt").get_json()["points"] == []
    assert client.get("/api/distribution").status_code == 400


def test_comparison_frame_joins_on_exact_wavelengths(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    body = client.get(f"/api/comparison?{SELECTION}").get_json()
    assert body["columns"] == ["Anthracene (absorption)", "Benzene (absorption)"]
    assert body["rows"] == [
        {"wavelength": 400.0, "Anthracene (absorption)": 10.0},
        {"wavelength": 500.0, "Anthracene (absorption)": 30.0, "Benzene (absorption)": 5.0},
        {"wavelength": 600.0, "Benzene (absorption)": 15.0},
    ]
    assert [s["distribution"] for s in body["series"]] == [False, False]


def test_comparison_normalizes_each_series_independently(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    body = client.get(f"/api/comparison?{SELECTION}&normalize=1").get_json()
    assert body["normalized"] is True
    rows = {r["wavelength"]: r for r in body["rows"]}
    assert rows[400.0]["Anthracene (absorption)"] == 0.0
    assert rows[500.0]["Anthracene (absorption)"] == 1.0
    assert rows[500.0]["Benzene (absorption)"] == 0.0
    assert rows[600.0]["Benzene (absorption)"] == 1.0


def test_csv_export_matches_comparison_rows(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get(f"/export/comparison.csv?{SELECTION}")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert resp.headers["Content-Disposition"] == "attachment; filename=spectrum_comparison.csv"
    assert resp.get_data(as_text=True) == (
        "Wavelength (nm),Anthracene (absorption),Benzene (absorption)\n"
        "400,10,\n"
        "500,30,5\n"
        "600,,15\n"
    )

    with_dist = f"{SELECTION}&dist0Type=gaussian&dist0LowWavelength=400&dist0HighWavelength=600&dist0Points=11"
    lines = client.get(f"/export/comparison.csv?{with_dist}").get_data(as_text=True).splitlines()
    chart_rows = client.get(f"/api/comparison?{with_dist}").get_json()["rows"]
    assert lines[0].endswith(",Gaussian Distribution 1")
    assert len(lines) - 1 == len(chart_rows) == 11


def test_dashboard_renders_selection(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get(f"/?{SELECTION}&dist0Type=blackbody&q=anthra")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Anthracene (absorption)" in html
    assert "Blackbody Distribution 1" in html
    assert "<polyline" in html

    empty = client.get("/").get_data(as_text=True)
    assert "Select spectra to view comparison" in empty


def test_add_and_remove_redirects_update_query_state(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    resp = client.get("/add?spectrum0=1:absorption&compound_id=2&type=emission&q=benz")
    assert resp.status_code == 302
    assert _query(resp.headers["Location"]) == {"spectrum0": "1:absorption", "spectrum1": "2:emission"}

    resp = client.get("/remove?spectrum0=1:absorption&spectrum1=2:emission&compound_id=1&type=absorption")
    assert _query(resp.headers["Location"]) == {"spectrum1": "2:emission"}

    resp = client.get("/distributions/add?spectrum0=1:absorption&type=gaussian&lowWavelength=200&peakWavelength=550")
    assert _query(resp.headers["Location"]) == {
        "spectrum0": "1:absorption",
        "dist0Type": "gaussian",
        "dist0LowWavelength": "200",
        "dist0PeakWavelength": "550",
        "dist0Points": "1000",
    }


def test_database_files_are_served_with_long_cache(tmp_path) -> None:
    _, client = _make_client(tmp_path)
    target = tmp_path / "files" / "1"
    target.mkdir()
    (target / "structure.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    resp = client.get("/database-files/1/structure.png")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert "immutable" in resp.headers["Cache-Control"]
    resp.close()

    assert client.get("/database-files/1/missing.png").status_code == 404


def test_missing_database_degrades_gracefully(tmp_path) -> None:
    app = create_app(str(tmp_path / "missing.sqlite"), files_dir=str(tmp_path))
    client = app.test_client()

    assert client.get("/api/compounds").status_code == 503
    assert client.get("/api/comparison?spectrum0=1:absorption").status_code == 503

    body = client.get("/api/comparison?dist0Type=gaussian").get_json()
    assert body["columns"] == ["Gaussian Distribution 1"]
    assert client.get("/").status_code == 200

    health = client.get("/api/debug/health").get_json()
    assert health["status"] == "degraded"
    assert health["db_state"] == "unavailable"


def test_health_and_error_ring(tmp_path) -> None:
    app, client = _make_client(tmp_path)

    def boom():
        raise ValueError("boom")

    app.add_url_rule("/api/boom", "boom", boom)

    health = client.get("/api/debug/health").get_json()
    assert health["status"] == "ok"
    assert health["compounds"] == 3

    resp = client.get("/api/boom")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}

    errors = client.get("/api/debug/errors").get_json()
    assert errors["count"] == 1
    assert errors["errors"][0]["type"] == "ValueError"
    assert errors["errors"][0]["path"] == "/api/boom"

    client.post("/api/debug/errors/clear")
    assert client.get("/api/debug/errors").get_json()["count"] == 0


def test_dashboard_table_lists_every_chart_row(tmp_path) -> None:
    _, client = _make_client(tmp_path)

    html = client.get("/?dist0Type=gaussian").get_data(as_text=True)
    assert html.count("<tr><td>") == 1000
    assert "<tr><td>200 nm</td>" in html
    assert "<tr><td>800 nm</td>" in html
