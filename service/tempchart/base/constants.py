"""File for widely used constants."""

# Number of station-years kept in the recency cache.
DEFAULT_CACHE_SIZE = 3

# Smallest number of days the viewport can be zoomed into (two weeks).
MIN_VISIBLE_DAYS = 14

# Unit of all temperatures in the yearly data files.
UNIT_CELSIUS = "celsius"

UNIT_SYMBOLS = {
    UNIT_CELSIUS: "°C",
    "fahrenheit": "°F",
}
