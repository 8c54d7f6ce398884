"""Downloads daily min/max temperatures from the Open-Meteo archive.

Writes one minified JSON file per station and year, plus a meta.json per
station listing the years that were written:

    {output_dir}/{station_id}/{year}.json
    {output_dir}/{station_id}/meta.json
"""

import json
import logging
import os
import time
from typing import Any
import pandas as pd
from pydantic import BaseModel
import requests

from service.tempchart.base import constants as bc
from service.tempchart.models import Dataset, DayRecord, StationMeta


logger = logging.getLogger("openmeteo")

ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

ARCHIVE_TIMEZONE = "Asia/Seoul"


class StationInfo(BaseModel):
    name: str
    lat: float
    lon: float


STATIONS = {
    "108": StationInfo(name="Seoul", lat=37.5665, lon=126.9780),
    "112": StationInfo(name="Incheon", lat=37.4563, lon=126.7052),
    "119": StationInfo(name="Suwon", lat=37.2636, lon=127.0286),
    "159": StationInfo(name="Busan", lat=35.1796, lon=129.0756),
}


def fetch_single(url: str, params: dict[str, Any] | None = None, timeout=30):
    try:
        resp = requests.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError) as e:
        raise RuntimeError(f"Failed to fetch or parse {url}: {e}") from e


def archive_params(info: StationInfo, year: int) -> dict[str, Any]:
    return {
        "latitude": info.lat,
        "longitude": info.lon,
        "start_date": f"{year}-01-01",
        "end_date": f"{year}-12-31",
        "daily": "temperature_2m_max,temperature_2m_min",
        "timezone": ARCHIVE_TIMEZONE,
    }


def daily_frame(data: dict[str, Any]) -> pd.DataFrame:
    """Extracts the daily min/max temperatures from an archive API response.

    Days with a missing min or max value (e.g. future dates) are dropped.

    Raises:
        ValueError if the response has no daily time series.
    """
    daily = data.get("daily")
    if not daily or "time" not in daily:
        raise ValueError("Response contains no daily data")
    df = pd.DataFrame(
        {
            "date": daily["time"],
            "temp_min": daily["temperature_2m_min"],
            "temp_max": daily["temperature_2m_max"],
        }
    )
    return df.dropna(subset=["temp_min", "temp_max"])


def to_dataset(station_id: str, year: int, df: pd.DataFrame) -> Dataset:
    return Dataset(
        station_id=station_id,
        year=year,
        unit=bc.UNIT_CELSIUS,
        days=tuple(
            DayRecord(
                date=t.date,
                temp_min=float(t.temp_min),
                temp_max=float(t.temp_max),
            )
            for t in df.itertuples(index=False)
        ),
    )


def write_json(path: str, obj: Any, indent: int | None = None):
    with open(path, "w", encoding="utf-8") as f:
        if indent is None:
            json.dump(obj, f, separators=(",", ":"))
        else:
            json.dump(obj, f, indent=indent)


def process_station(
    output_dir: str,
    station_id: str,
    info: StationInfo,
    start_year: int,
    end_year: int,
    delay: float = 0.5,
) -> StationMeta:
    """Downloads and writes all years of one station, then its meta.json.

    A year that fails to download or has no data is logged and skipped.
    """
    logger.info("Processing station %s (%s)", station_id, info.name)
    station_dir = os.path.join(output_dir, station_id)
    os.makedirs(station_dir, exist_ok=True)

    years = []
    for year in range(start_year, end_year + 1):
        try:
            data = fetch_single(ARCHIVE_URL, params=archive_params(info, year))
            df = daily_frame(data)
        except (RuntimeError, ValueError) as e:
            logger.error("Failed to process %s/%d: %s", station_id, year, str(e))
            continue

        if df.empty:
            logger.warning("No data found for %s/%d", station_id, year)
            continue

        dataset = to_dataset(station_id, year, df)
        write_json(os.path.join(station_dir, f"{year}.json"), dataset.to_wire())
        years.append(year)
        logger.info("Saved %s/%d.json (%d days)", station_id, year, len(dataset))

        # Be polite to the API and avoid rate limits.
        if delay > 0:
            time.sleep(delay)

    meta = StationMeta(
        station_id=station_id, display_name=info.name, available_years=years
    )
    write_json(os.path.join(station_dir, "meta.json"), meta.to_wire(), indent=2)
    return meta


def run_update(
    output_dir: str,
    station_ids: list[str],
    start_year: int,
    end_year: int,
    delay: float = 0.5,
) -> list[StationMeta]:
    started_time = time.time()
    metas = []
    for station_id in station_ids:
        info = STATIONS.get(station_id)
        if info is None:
            raise ValueError(f"Unknown station: {station_id}")
        metas.append(
            process_station(
                output_dir, station_id, info, start_year, end_year, delay=delay
            )
        )
    logger.info(
        "Done. Wrote data for %d stations in %.1fs.",
        len(metas),
        time.time() - started_time,
    )
    return metas
