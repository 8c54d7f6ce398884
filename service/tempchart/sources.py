"""Retrieval of station metadata and yearly datasets.

All data sources read the layout written by the data_updater:

    {base}/{station_id}/meta.json
    {base}/{station_id}/{year}.json
"""

import json
import logging
import math
from pathlib import Path
from typing import Any
import numpy as np
import requests

from service.tempchart.base import constants as bc
from service.tempchart.base import dates
from service.tempchart.base.errors import RetrievalError
from service.tempchart.models import Dataset, DayRecord, StationMeta

logger = logging.getLogger("sources")


class DataSource:
    """Base class of all retrieval collaborators."""

    def fetch_meta(self, station_id: str) -> StationMeta:
        raise NotImplementedError(f"fetch_meta not implemented by {self.__class__}")

    def fetch_year(self, station_id: str, year: int) -> Dataset:
        raise NotImplementedError(f"fetch_year not implemented by {self.__class__}")


def _parse_meta(obj: Any, station_id: str) -> StationMeta:
    try:
        return StationMeta.from_wire(obj)
    except (KeyError, TypeError, ValueError) as e:
        raise RetrievalError(
            f"Malformed station metadata: {e}", station_id=station_id
        ) from e


def _parse_year(obj: Any, station_id: str, year: int) -> Dataset:
    try:
        return Dataset.from_wire(obj)
    except (KeyError, TypeError, ValueError) as e:
        raise RetrievalError(
            f"Malformed year data: {e}", station_id=station_id, year=year
        ) from e


class FileDataSource(DataSource):

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def _read_json(self, path: Path, station_id: str, year: int | None = None):
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise RetrievalError(
                f"Failed to read {path}: {e}", station_id=station_id, year=year
            ) from e

    def fetch_meta(self, station_id: str) -> StationMeta:
        path = self.base_dir / station_id / "meta.json"
        return _parse_meta(self._read_json(path, station_id), station_id)

    def fetch_year(self, station_id: str, year: int) -> Dataset:
        path = self.base_dir / station_id / f"{year}.json"
        obj = self._read_json(path, station_id, year)
        return _parse_year(obj, station_id, year)


class HttpDataSource(DataSource):

    def __init__(self, base_url: str, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _fetch_json(self, url: str, station_id: str, year: int | None = None):
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise RetrievalError(
                f"Failed to fetch or parse {url}: {e}",
                station_id=station_id,
                year=year,
            ) from e

    def fetch_meta(self, station_id: str) -> StationMeta:
        url = f"{self.base_url}/{station_id}/meta.json"
        return _parse_meta(self._fetch_json(url, station_id), station_id)

    def fetch_year(self, station_id: str, year: int) -> Dataset:
        url = f"{self.base_url}/{station_id}/{year}.json"
        obj = self._fetch_json(url, station_id, year)
        return _parse_year(obj, station_id, year)


class SyntheticDataSource(DataSource):
    """Generates plausible placeholder data for offline and local use.

    The seasonal shape is fixed (coldest mid-January, warmest mid-July),
    the daily variation is random. Pass a seed for reproducible data.
    """

    AVAILABLE_YEARS = [2020, 2021, 2022, 2023, 2024, 2025]

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    def fetch_meta(self, station_id: str) -> StationMeta:
        return StationMeta(
            station_id=station_id,
            display_name="Local Test",
            available_years=list(self.AVAILABLE_YEARS),
        )

    def fetch_year(self, station_id: str, year: int) -> Dataset:
        logger.info("Generating synthetic data for %s/%d", station_id, year)
        days = dates.days_of_year(year)
        day_of_year = np.arange(1, len(days) + 1)
        angle = (day_of_year - 15) / 365 * 2 * math.pi
        base = 12.5 - 15 * np.cos(angle)
        variation = (self._rng.random(len(days)) - 0.5) * 10
        mins = np.round(base + variation - 5, 1)
        maxs = np.round(base + variation + 5, 1)

        return Dataset(
            station_id=station_id,
            year=year,
            unit=bc.UNIT_CELSIUS,
            days=tuple(
                DayRecord(date=d, temp_min=lo, temp_max=hi)
                for d, lo, hi in zip(days, mins.tolist(), maxs.tolist())
            ),
        )
