import numpy as np
import pandas as pd

from service.tempchart.models import Dataset


# Day-over-day trend of the daily midpoint temperature.
TREND_WARMER = "warmer"
TREND_COLDER = "colder"
# The first day of a dataset has no predecessor to compare with.
TREND_NEUTRAL = "neutral"


def day_trends(dataset: Dataset) -> list[str]:
    """Classifies each day by comparing its midpoint with the previous day's.

    A day is "colder" only if its midpoint is strictly below the previous
    day's, equal midpoints count as "warmer". Each day is compared with its
    real predecessor in the dataset, so the result does not depend on which
    part of the dataset is visible.
    """
    trends = []
    prev_mid = None
    for d in dataset.days:
        mid = d.temp_mid
        if prev_mid is None:
            trends.append(TREND_NEUTRAL)
        elif mid < prev_mid:
            trends.append(TREND_COLDER)
        else:
            trends.append(TREND_WARMER)
        prev_mid = mid
    return trends


def trend_frame(dataset: Dataset) -> pd.DataFrame:
    """Returns the days of dataset with midpoint and trend columns.

    Columns: date, temp_min, temp_max, temp_mid, trend, index (position
    in the dataset).
    """
    df = dataset.to_frame()
    df["temp_mid"] = (df["temp_min"] + df["temp_max"]) / 2
    prev_mid = df["temp_mid"].shift(1)
    df["trend"] = np.where(df["temp_mid"] < prev_mid, TREND_COLDER, TREND_WARMER)
    if not df.empty:
        df.iloc[0, df.columns.get_loc("trend")] = TREND_NEUTRAL
    df["index"] = np.arange(len(df))
    return df.reset_index()
