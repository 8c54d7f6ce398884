from typing import TypeAlias, Union
import altair as alt
import pandas as pd

from service.tempchart import render as rp
from service.tempchart.base import constants as bc
from service.tempchart.base.errors import EmptyDatasetError
from service.tempchart.models import Dataset

from . import colors
from . import transform as tf

AltairChart: TypeAlias = Union[alt.Chart, alt.LayerChart]


def _verify_range(dataset: Dataset, start: int, end: int):
    if not dataset.days:
        raise EmptyDatasetError(dataset.station_id, dataset.year)
    if not 0 <= start < end <= len(dataset.days):
        raise ValueError(
            f"Invalid range [{start}, {end}) for {len(dataset.days)} days"
        )


def candle_chart(
    dataset: Dataset,
    start: int = 0,
    end: int | None = None,
    selected_index: int | None = None,
    title: str | None = None,
) -> AltairChart:
    """Returns a Vega-Lite candle chart of the days [start, end) of dataset.

    Each day is a rule from its min to its max temperature, colored by its
    trend versus the previous day. The temperature axis spans the whole
    dataset, like the interactive chart does.
    """
    if end is None:
        end = len(dataset.days)
    _verify_range(dataset, start, end)

    df = tf.trend_frame(dataset).iloc[start:end]
    lo, hi = rp.temp_scale(dataset)
    symbol = bc.UNIT_SYMBOLS.get(dataset.unit, "")
    if title is None:
        title = f"Daily min/max temperature • {dataset.station_id} • {dataset.year}"

    x = alt.X("date:T").axis(format="%m.%d", title=None)
    candles = (
        alt.Chart(df)
        .mark_rule(strokeWidth=2)
        .encode(
            x=x,
            y=alt.Y("temp_min:Q")
            .scale(domain=[lo, hi], nice=False)
            .axis(title=f"Temperature ({symbol})", grid=True),
            y2=alt.Y2("temp_max:Q"),
            color=alt.Color("trend:N", scale=colors.trend_scale(), legend=None),
            tooltip=[
                alt.Tooltip("date:T", title="Date", format="%Y-%m-%d"),
                alt.Tooltip("temp_min:Q", title="Min", format=".1f"),
                alt.Tooltip("temp_max:Q", title="Max", format=".1f"),
            ],
        )
    )
    layers = [candles]

    if selected_index is not None and start <= selected_index < end:
        sel = df[df["index"] == selected_index]
        layers.append(
            alt.Chart(sel)
            .mark_rule(strokeDash=[5, 5], color=colors.SELECTION_COLOR)
            .encode(x=x)
        )
        markers = pd.DataFrame(
            {
                "date": [sel["date"].iloc[0]] * 2,
                "value": [sel["temp_min"].iloc[0], sel["temp_max"].iloc[0]],
            }
        )
        layers.append(
            alt.Chart(markers)
            .mark_point(
                filled=True,
                size=60,
                fill=colors.MARKER_FILL,
                stroke=colors.SELECTION_COLOR,
                strokeWidth=2,
                opacity=1,
            )
            .encode(x=x, y=alt.Y("value:Q"))
        )

    return alt.layer(*layers).properties(
        width="container",
        autosize={"type": "fit", "contains": "padding"},
        title=title,
    )
