import datetime
from typing import Any
import pandas as pd
import unittest

from service.tempchart.models import Dataset, DayRecord


def make_dataset(
    temps: list[tuple[float, float]],
    station_id: str = "108",
    year: int = 2024,
) -> Dataset:
    """Creates a dataset of consecutive days starting on Jan 1 of year.

    Args:
        temps: (temp_min, temp_max) pairs, one per day.
    """
    first = datetime.date(year, 1, 1)
    return Dataset(
        station_id=station_id,
        year=year,
        days=tuple(
            DayRecord(
                date=first + datetime.timedelta(days=i), temp_min=lo, temp_max=hi
            )
            for i, (lo, hi) in enumerate(temps)
        ),
    )


def ramp_dataset(n: int, station_id: str = "108", year: int = 2024) -> Dataset:
    """Creates a dataset of n days whose temperatures rise by 0.1 degrees per day."""
    return make_dataset(
        [(-5 + i * 0.1, 5 + i * 0.1) for i in range(n)],
        station_id=station_id,
        year=year,
    )


class PandasTestCase(unittest.TestCase):
    def assertSeriesValuesEqual(self, series: pd.Series, expected_values: list[Any]):
        """Check only the values of a Series (ignore index, dtype, name)."""
        self.assertEqual(series.tolist(), expected_values)

    def assertColumnNames(self, df: pd.DataFrame, expected_names):
        self.assertEqual(df.columns.to_list(), expected_names)
