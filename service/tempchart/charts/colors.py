import altair as alt

from . import transform as tf


# Day-over-day trend colors of the candle marks.
COLORS_TREND = {
    tf.TREND_WARMER: "#e31a1c",
    tf.TREND_COLDER: "#1f78b4",
    tf.TREND_NEUTRAL: "#d63384",
}


COLORS_COMMON_GRAYS = {
    "White": "#ffffff",
    "VeryLightGray": "#eeeeee",
    "MediumGray": "#666666",
    "DarkGray": "#333333",
}

GRID_COLOR = COLORS_COMMON_GRAYS["VeryLightGray"]
LABEL_COLOR = COLORS_COMMON_GRAYS["MediumGray"]
SELECTION_COLOR = COLORS_COMMON_GRAYS["DarkGray"]
MARKER_FILL = COLORS_COMMON_GRAYS["White"]


def trend_color(trend: str) -> str:
    """Returns the hex color of the given trend."""
    if trend not in COLORS_TREND:
        raise ValueError(f"Unknown trend: {trend}")
    return COLORS_TREND[trend]


def trend_scale() -> alt.Scale:
    """Returns an Altair color scale mapping trend names to their colors."""
    domain = list(COLORS_TREND.keys())
    return alt.Scale(domain=domain, range=[COLORS_TREND[t] for t in domain])
