"""pytest fixtures for data_updater tests."""

import datetime
import pytest
import requests


class FakeArchiveResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        return self.payload


class FakeArchive:
    """Stands in for the Open-Meteo archive API.

    Answers every request with a full year of daily data, except for the
    years listed in `failing` (HTTP 500) and `missing` (all values null).
    """

    def __init__(self):
        self.requests: list[dict] = []
        self.failing: set[int] = set()
        self.missing: set[int] = set()

    def daily(self, year: int) -> dict:
        first = datetime.date(year, 1, 1)
        n = (datetime.date(year + 1, 1, 1) - first).days
        times = [(first + datetime.timedelta(days=i)).isoformat() for i in range(n)]
        if year in self.missing:
            tmin = [None] * n
            tmax = [None] * n
        else:
            tmin = [round(-3 + 0.05 * i, 1) for i in range(n)]
            tmax = [round(6 + 0.05 * i, 1) for i in range(n)]
        return {
            "time": times,
            "temperature_2m_min": tmin,
            "temperature_2m_max": tmax,
        }

    def get(self, url, params=None, timeout=None):
        self.requests.append(params)
        year = int(params["start_date"][:4])
        if year in self.failing:
            return FakeArchiveResponse({"error": True}, status_code=500)
        return FakeArchiveResponse({"daily": self.daily(year)})


@pytest.fixture
def fake_archive(monkeypatch):
    archive = FakeArchive()
    monkeypatch.setattr(requests, "get", archive.get)
    return archive
