"""Vega-Lite export helpers."""

from altair.utils import spec_to_html

# Also used for HTML exports.
VEGA_VERSION = "5.33.0"
VEGA_LITE_VERSION = "5.23.0"
VEGA_EMBED_VERSION = "6.29.0"


def chart_html(spec: dict) -> str:
    """Returns a standalone HTML page embedding the Vega-Lite spec.

    The Vega library versions are pinned explicitly: chart.to_html()
    uses whatever versions the installed altair release ships with.
    """
    return spec_to_html(
        spec,
        mode="vega-lite",
        vega_version=VEGA_VERSION,
        vegalite_version=VEGA_LITE_VERSION,
        vegaembed_version=VEGA_EMBED_VERSION,
        base_url="https://unpkg.com",
    )
