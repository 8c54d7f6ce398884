import pytest

from . import colors
from . import transform as tf


def test_trend_color():
    assert colors.trend_color(tf.TREND_WARMER) == "#e31a1c"
    assert colors.trend_color(tf.TREND_COLDER) == "#1f78b4"
    assert colors.trend_color(tf.TREND_NEUTRAL) == "#d63384"


def test_trend_color_unknown():
    with pytest.raises(ValueError):
        colors.trend_color("lukewarm")


def test_trend_scale_pairs_domain_and_range():
    scale = colors.trend_scale().to_dict()
    assert len(scale["domain"]) == len(scale["range"]) == 3
    for trend, color in zip(scale["domain"], scale["range"]):
        assert colors.COLORS_TREND[trend] == color


def test_overlay_colors():
    assert colors.GRID_COLOR == "#eeeeee"
    assert colors.LABEL_COLOR == "#666666"
    assert colors.SELECTION_COLOR == "#333333"
    assert colors.MARKER_FILL == "#ffffff"
