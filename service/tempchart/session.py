"""Station and year navigation around a single chart surface."""

import logging
from pydantic import BaseModel

from service.tempchart.base import constants as bc
from service.tempchart.base import dates
from service.tempchart.base.errors import EmptyDatasetError, RetrievalError
from service.tempchart.cache import RecencyCache
from service.tempchart.models import Frame, SelectedDay, StationMeta
from service.tempchart.sources import DataSource
from service.tempchart.viewport import ChartController, InputEvent

logger = logging.getLogger("session")

DEFAULT_STATION = "108"  # Seoul
DEFAULT_YEAR = 2025

# Zoom amount of the zoom in/out buttons.
BUTTON_ZOOM_STEP = 0.25


class SelectionDetails(BaseModel):
    """Display texts for the detail panel of the selected day."""

    date: str
    temp_min: str
    temp_max: str


def selection_details(day: SelectedDay) -> SelectionDetails:
    symbol = bc.UNIT_SYMBOLS.get(day.unit, "")
    return SelectionDetails(
        date=dates.long_date(day.date),
        temp_min=f"{day.temp_min:g}{symbol}",
        temp_max=f"{day.temp_max:g}{symbol}",
    )


class ChartSession:
    """Drives one chart: which station and year is shown, plus the zoom buttons.

    Loads are sequential: each load_* call completes before it returns,
    which is what the RecencyCache expects of its callers. Failures are
    recorded in `error` and leave the displayed dataset unchanged.
    """

    def __init__(
        self,
        source: DataSource,
        cache: RecencyCache,
        controller: ChartController,
        fallback: DataSource | None = None,
        station_id: str = DEFAULT_STATION,
        year: int = DEFAULT_YEAR,
    ):
        self.source = source
        self.cache = cache
        self.controller = controller
        self.fallback = fallback
        self.station_id = station_id
        self.current_year = year
        self.meta: StationMeta | None = None
        self.error: str | None = None
        self.frame: Frame | None = None
        self.selection: SelectionDetails | None = None
        if controller.on_select is None:
            controller.on_select = self._on_select

    @property
    def available_years(self) -> list[int]:
        return self.meta.available_years if self.meta is not None else []

    def _on_select(self, day: SelectedDay):
        self.selection = selection_details(day)

    def _update(self, frame: Frame | None) -> Frame | None:
        if frame is not None:
            self.frame = frame
        return frame

    def _fetch_meta(self, station_id: str) -> StationMeta:
        try:
            return self.source.fetch_meta(station_id)
        except RetrievalError as e:
            if self.fallback is None:
                raise
            logger.info("Fetching metadata failed (%s), using fallback", e)
            return self.fallback.fetch_meta(station_id)

    def load_station(self, station_id: str) -> bool:
        """Switches to station_id and loads the current (or latest) year.

        Returns True if a dataset for the new station is shown.
        """
        try:
            meta = self._fetch_meta(station_id)
        except RetrievalError as e:
            logger.warning("Failed to load station %s: %s", station_id, e)
            self.error = f"Station metadata not found: {station_id}"
            return False
        if not meta.available_years:
            self.error = f"No data available for station {station_id}"
            return False

        self.station_id = station_id
        self.meta = meta
        if self.current_year not in meta.available_years:
            self.current_year = meta.available_years[-1]
        return self.load_year(self.current_year)

    def change_year(self, offset: int) -> bool:
        """Moves offset steps through the available years.

        Moving past the first or last available year is a no-op.
        """
        years = self.available_years
        if self.current_year not in years:
            return False
        i = years.index(self.current_year) + offset
        if not 0 <= i < len(years):
            return False
        return self.load_year(years[i])

    def load_year(self, year: int) -> bool:
        self.current_year = year
        try:
            dataset = self.cache.get(self.station_id, year)
        except (RetrievalError, EmptyDatasetError) as e:
            logger.warning("Failed to load %s/%d: %s", self.station_id, year, e)
            self.error = f"Failed to load data for {year}"
            return False

        self.error = None
        self.selection = None
        self._update(self.controller.set_dataset(dataset))
        return True

    def zoom_in(self) -> Frame | None:
        return self._update(self.controller.zoom_by(BUTTON_ZOOM_STEP))

    def zoom_out(self) -> Frame | None:
        return self._update(self.controller.zoom_by(-BUTTON_ZOOM_STEP))

    def reset_zoom(self) -> Frame | None:
        return self._update(self.controller.reset_zoom())

    def dispatch(self, event: InputEvent) -> Frame | None:
        return self._update(self.controller.dispatch(event))
