import json
import pytest
from fastapi.testclient import TestClient

from service.tempchart.models import StationMeta

from .app import app
from .testhelpers import ramp_dataset


@pytest.fixture
def data_dir(tmp_path):
    station_dir = tmp_path / "108"
    station_dir.mkdir()
    meta = StationMeta(
        station_id="108", display_name="Seoul", available_years=[2023, 2024]
    )
    (station_dir / "meta.json").write_text(json.dumps(meta.to_wire()))
    for year, n in [(2023, 365), (2024, 60)]:
        ds = ramp_dataset(n, year=year)
        (station_dir / f"{year}.json").write_text(json.dumps(ds.to_wire()))
    # Present in meta.json, but broken.
    (station_dir / "2022.json").write_text("[")
    return tmp_path


@pytest.fixture
def client(monkeypatch, data_dir):
    monkeypatch.setenv("TEMPCHART_DATA_DIR", str(data_dir))
    monkeypatch.delenv("TEMPCHART_DATA_URL", raising=False)
    monkeypatch.delenv("TEMPCHART_OFFLINE", raising=False)
    monkeypatch.setenv("TEMPCHART_CACHE_SIZE", "2")
    with TestClient(app) as c:
        yield c


@pytest.fixture
def offline_client(monkeypatch, data_dir):
    monkeypatch.setenv("TEMPCHART_DATA_DIR", str(data_dir))
    monkeypatch.delenv("TEMPCHART_DATA_URL", raising=False)
    monkeypatch.setenv("TEMPCHART_OFFLINE", "1")
    monkeypatch.setenv("TEMPCHART_SEED", "11")
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_station_meta(client):
    resp = client.get("/stations/108/meta")
    assert resp.status_code == 200
    assert resp.json() == {
        "station_id": "108",
        "name_en": "Seoul",
        "available_years": [2023, 2024],
    }


def test_unknown_station_is_404(client):
    resp = client.get("/stations/999/meta")
    assert resp.status_code == 404
    assert "station 999" in resp.json()["detail"]


def test_year_data(client):
    resp = client.get("/stations/108/years/2024")
    assert resp.status_code == 200
    data = resp.json()
    assert data["station"] == "108"
    assert data["year"] == 2024
    assert data["unit"] == "celsius"
    assert len(data["days"]) == 60
    assert data["days"][0] == ["2024-01-01", -5.0, 5.0]


def test_year_data_is_cached(client):
    client.get("/stations/108/years/2024")
    client.get("/stations/108/years/2023")
    cache = app.state.cache
    assert cache.capacity == 2
    assert [str(k) for k in cache.keys()] == ["108-2024", "108-2023"]


def test_missing_year_is_404(client):
    resp = client.get("/stations/108/years/2019")
    assert resp.status_code == 404
    assert "year 2019" in resp.json()["detail"]


def test_broken_year_is_404(client):
    assert client.get("/stations/108/years/2022").status_code == 404


def test_offline_mode_substitutes_synthetic_data(offline_client):
    resp = offline_client.get("/stations/108/years/2019")
    assert resp.status_code == 200
    assert len(resp.json()["days"]) == 365

    meta = offline_client.get("/stations/555/meta").json()
    assert meta["name_en"] == "Local Test"


def test_chart_svg(client):
    resp = client.get("/stations/108/years/2023/chart.svg?width=850&height=400")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("image/svg+xml")
    assert resp.text.startswith("<svg")
    assert resp.text.count('class="wick"') == 365


def test_chart_svg_window(client):
    resp = client.get(
        "/stations/108/years/2023/chart.svg",
        params={"start": 100, "count": 30, "selected": 110},
    )
    assert resp.status_code == 200
    assert resp.text.count('class="bar"') == 30
    assert resp.text.count('class="selection"') == 1


def test_chart_svg_window_is_clamped(client):
    # count is raised to two weeks, start pulled back into the data.
    resp = client.get(
        "/stations/108/years/2023/chart.svg", params={"start": 1000, "count": 3}
    )
    assert resp.status_code == 200
    assert resp.text.count('class="bar"') == 14


def test_chart_svg_invalid_size(client):
    resp = client.get("/stations/108/years/2023/chart.svg?width=0")
    assert resp.status_code == 400


def test_chart_svg_missing_year(client):
    assert client.get("/stations/108/years/2019/chart.svg").status_code == 404


def test_vega_chart(client):
    resp = client.get("/stations/108/years/2024/chart?selected=3")
    assert resp.status_code == 200
    spec = resp.json()["vega_spec"]
    assert len(spec["layer"]) == 3


def test_vega_chart_html(client):
    resp = client.get(
        "/stations/108/years/2024/chart", headers={"Accept": "text/html"}
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "vega-embed" in resp.text


def test_vega_chart_invalid_range(client):
    resp = client.get("/stations/108/years/2024/chart?start=50&end=70")
    assert resp.status_code == 400
