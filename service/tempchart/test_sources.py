import datetime
import json
import pytest
import requests

from service.tempchart.base.errors import RetrievalError

from . import sources


def write_station(base, station_id="108", years=(2023, 2024)):
    station_dir = base / station_id
    station_dir.mkdir(parents=True)
    (station_dir / "meta.json").write_text(
        json.dumps(
            {
                "station_id": station_id,
                "name_en": "Seoul",
                "available_years": list(years),
            }
        )
    )
    for year in years:
        (station_dir / f"{year}.json").write_text(
            json.dumps(
                {
                    "station": station_id,
                    "year": year,
                    "unit": "celsius",
                    "days": [
                        [f"{year}-01-01", -4.1, 2.3],
                        [f"{year}-01-02", -6.0, 0.5],
                    ],
                }
            )
        )


class TestFileDataSource:

    def test_fetch_meta(self, tmp_path):
        write_station(tmp_path)
        meta = sources.FileDataSource(tmp_path).fetch_meta("108")
        assert meta.display_name == "Seoul"
        assert meta.available_years == [2023, 2024]

    def test_fetch_year(self, tmp_path):
        write_station(tmp_path)
        ds = sources.FileDataSource(str(tmp_path)).fetch_year("108", 2024)
        assert ds.station_id == "108"
        assert ds.year == 2024
        assert len(ds) == 2
        assert ds.days[1].date == datetime.date(2024, 1, 2)
        assert ds.days[1].temp_min == -6.0

    def test_missing_file(self, tmp_path):
        write_station(tmp_path)
        src = sources.FileDataSource(tmp_path)
        with pytest.raises(RetrievalError) as exc:
            src.fetch_year("108", 2019)
        assert exc.value.year == 2019
        with pytest.raises(RetrievalError) as exc:
            src.fetch_meta("999")
        assert exc.value.station_id == "999"
        assert exc.value.year is None

    def test_malformed_json(self, tmp_path):
        write_station(tmp_path)
        (tmp_path / "108" / "2024.json").write_text("{not json")
        with pytest.raises(RetrievalError):
            sources.FileDataSource(tmp_path).fetch_year("108", 2024)

    def test_malformed_payload(self, tmp_path):
        write_station(tmp_path)
        (tmp_path / "108" / "2024.json").write_text(
            json.dumps({"station": "108", "year": 2024, "days": [["2024-01-01"]]})
        )
        with pytest.raises(RetrievalError, match="Malformed"):
            sources.FileDataSource(tmp_path).fetch_year("108", 2024)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON")
        return self.payload


class TestHttpDataSource:

    def test_fetch_year(self, monkeypatch):
        requested = []

        def fake_get(url, timeout):
            requested.append(url)
            return FakeResponse(
                {
                    "station": "112",
                    "year": 2022,
                    "unit": "celsius",
                    "days": [["2022-01-01", -8.5, -0.5]],
                }
            )

        monkeypatch.setattr(requests, "get", fake_get)
        src = sources.HttpDataSource("https://example.com/data/")
        ds = src.fetch_year("112", 2022)
        assert requested == ["https://example.com/data/112/2022.json"]
        assert ds.days[0].temp_max == -0.5

    def test_fetch_meta(self, monkeypatch):
        monkeypatch.setattr(
            requests,
            "get",
            lambda url, timeout: FakeResponse(
                {"station_id": "159", "name_en": "Busan", "available_years": [2021]}
            ),
        )
        meta = sources.HttpDataSource("https://example.com").fetch_meta("159")
        assert meta.display_name == "Busan"

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(
            requests, "get", lambda url, timeout: FakeResponse(status_code=404)
        )
        with pytest.raises(RetrievalError) as exc:
            sources.HttpDataSource("https://example.com").fetch_year("108", 2024)
        assert "404" in str(exc.value)
        assert "(station 108, year 2024)" in str(exc.value)

    def test_connection_error(self, monkeypatch):
        def fail(url, timeout):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr(requests, "get", fail)
        with pytest.raises(RetrievalError):
            sources.HttpDataSource("https://example.com").fetch_meta("108")

    def test_invalid_json(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse())
        with pytest.raises(RetrievalError):
            sources.HttpDataSource("https://example.com").fetch_year("108", 2024)


class TestSyntheticDataSource:

    @pytest.mark.parametrize(
        "year,days", [(2024, 366), (2023, 365), (2000, 366), (1900, 365)]
    )
    def test_one_record_per_calendar_day(self, year, days):
        ds = sources.SyntheticDataSource(seed=1).fetch_year("108", year)
        assert len(ds) == days
        assert ds.days[0].date == datetime.date(year, 1, 1)
        assert ds.days[-1].date == datetime.date(year, 12, 31)
        assert ds.unit == "celsius"

    def test_min_below_max(self):
        ds = sources.SyntheticDataSource(seed=7).fetch_year("108", 2024)
        assert all(d.temp_min <= d.temp_max for d in ds.days)

    def test_seasonal_shape(self):
        ds = sources.SyntheticDataSource(seed=7).fetch_year("108", 2023)
        january = [d.temp_mid for d in ds.days[:31]]
        july = [d.temp_mid for d in ds.days[181:212]]
        assert sum(july) / len(july) > sum(january) / len(january) + 20

    def test_seed_is_reproducible(self):
        a = sources.SyntheticDataSource(seed=42).fetch_year("108", 2024)
        b = sources.SyntheticDataSource(seed=42).fetch_year("108", 2024)
        c = sources.SyntheticDataSource(seed=43).fetch_year("108", 2024)
        assert a == b
        assert a != c

    def test_meta(self):
        meta = sources.SyntheticDataSource().fetch_meta("112")
        assert meta.station_id == "112"
        assert meta.display_name == "Local Test"
        assert meta.available_years == [2020, 2021, 2022, 2023, 2024, 2025]


def test_base_class_is_abstract():
    with pytest.raises(NotImplementedError):
        sources.DataSource().fetch_year("108", 2024)
