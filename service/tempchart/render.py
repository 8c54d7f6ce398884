"""Render pipeline for the daily temperature candle chart.

render() is a pure function of the dataset, the viewport, the selection and
the surface size. It returns the draw primitives of one frame together with
the Layout that interaction code needs to map pointer positions back to days.
"""

import math

from service.tempchart.base import constants as bc
from service.tempchart.base import dates
from service.tempchart.charts import colors
from service.tempchart.charts import transform as tf
from service.tempchart.models import (
    Circle,
    Dataset,
    Frame,
    Layout,
    Line,
    Primitive,
    Text,
    Viewport,
)

PADDING_TOP = 40
PADDING_RIGHT = 50
PADDING_BOTTOM = 40
PADDING_LEFT = 50

# Number of horizontal grid lines (and temperature labels).
Y_TICKS = 6
# Approximate number of date labels on the x axis.
X_LABELS = 6
# Candles wider than this are drawn as bars instead of wicks.
BAR_MIN_WIDTH = 4
MARKER_RADIUS = 4


def visible_slice(viewport: Viewport, total: int) -> tuple[int, int]:
    """Returns the discrete [start, end) range of days covered by viewport."""
    start = max(0, math.floor(viewport.start_index))
    end = min(total, start + math.ceil(viewport.visible_count))
    return start, max(start, end)


def temp_scale(dataset: Dataset) -> tuple[float, float]:
    """Returns the (low, high) bounds of the temperature axis.

    The bounds cover the whole dataset, not just the visible days, so the
    axis does not jump while panning or zooming. The data range is padded by
    10% on both sides and rounded outwards to whole degrees.
    """
    lo, hi = dataset.temp_bounds()
    pad = (hi - lo) * 0.1
    lo = math.floor(lo - pad)
    hi = math.ceil(hi + pad)
    if hi <= lo:
        lo, hi = min(lo, hi) - 1, max(lo, hi) + 1
    return lo, hi


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def render(
    dataset: Dataset,
    viewport: Viewport,
    selected_index: int | None,
    width: float,
    height: float,
) -> Frame:
    total = len(dataset.days)
    start, end = visible_slice(viewport, total)
    n = end - start
    chart_width = width - PADDING_LEFT - PADDING_RIGHT
    chart_height = height - PADDING_TOP - PADDING_BOTTOM
    # Nothing fits on a surface smaller than its padding.
    if n == 0 or chart_width <= 0 or chart_height <= 0:
        return Frame()

    bar_width = chart_width / n

    layout = Layout(
        width=width,
        height=height,
        left=PADDING_LEFT,
        top=PADDING_TOP,
        right=PADDING_RIGHT,
        bottom=PADDING_BOTTOM,
        bar_width=bar_width,
        start=start,
        end=end,
    )

    lo, hi = temp_scale(dataset)
    range_y = hi - lo

    def y_of(temp: float) -> float:
        return PADDING_TOP + chart_height - (temp - lo) / range_y * chart_height

    prims: list[Primitive] = []

    # Grid and temperature axis.
    symbol = bc.UNIT_SYMBOLS.get(dataset.unit, "")
    for i in range(Y_TICKS):
        temp = lo + range_y * i / (Y_TICKS - 1)
        y = y_of(temp)
        prims.append(
            Line(
                x1=PADDING_LEFT,
                y1=y,
                x2=width - PADDING_RIGHT,
                y2=y,
                color=colors.GRID_COLOR,
                tag="grid",
            )
        )
        prims.append(
            Text(
                x=width - PADDING_RIGHT + 5,
                y=y,
                text=f"{_round_half_up(temp)}{symbol}",
                color=colors.LABEL_COLOR,
                align="left",
                baseline="middle",
                tag="y_label",
            )
        )

    # Date axis: label every step-th visible day.
    step = math.ceil(n / X_LABELS)
    for i in range(0, n, step):
        day = dataset.days[start + i]
        prims.append(
            Text(
                x=layout.bar_center(start + i),
                y=height - PADDING_BOTTOM + 10,
                text=dates.month_day_label(day.date),
                color=colors.LABEL_COLOR,
                align="center",
                baseline="top",
                tag="x_label",
            )
        )

    # Candles.
    gap = max(1, bar_width * 0.2)
    candle_width = max(1, bar_width - gap)
    if candle_width > BAR_MIN_WIDTH:
        mark_width, mark_tag = candle_width, "bar"
    else:
        mark_width, mark_tag = max(1, min(2, candle_width / 3)), "wick"

    trends = tf.day_trends(dataset)
    for i in range(start, end):
        day = dataset.days[i]
        x = layout.bar_center(i)
        prims.append(
            Line(
                x1=x,
                y1=y_of(day.temp_min),
                x2=x,
                y2=y_of(day.temp_max),
                color=colors.trend_color(trends[i]),
                width=mark_width,
                tag=mark_tag,
            )
        )

    # Selection overlay, only if the selected day is visible.
    if selected_index is not None and start <= selected_index < end:
        day = dataset.days[selected_index]
        x = layout.bar_center(selected_index)
        prims.append(
            Line(
                x1=x,
                y1=PADDING_TOP,
                x2=x,
                y2=height - PADDING_BOTTOM,
                color=colors.SELECTION_COLOR,
                width=1,
                dash=(5, 5),
                tag="selection",
            )
        )
        for temp in (day.temp_min, day.temp_max):
            prims.append(
                Circle(
                    cx=x,
                    cy=y_of(temp),
                    r=MARKER_RADIUS,
                    fill=colors.MARKER_FILL,
                    stroke=colors.SELECTION_COLOR,
                    stroke_width=2,
                    tag="marker",
                )
            )

    return Frame(primitives=prims, layout=layout)
