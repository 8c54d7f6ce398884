import datetime
from typing import Any
import pandas as pd
from pydantic import BaseModel, ConfigDict, field_validator

from service.tempchart.base import constants as bc


class DayRecord(BaseModel):
    """Min/max temperature of a single calendar day.

    temp_min <= temp_max is expected, but not enforced: upstream data
    occasionally violates it and consumers must cope.
    """

    date: datetime.date
    temp_min: float
    temp_max: float

    model_config = ConfigDict(frozen=True)

    @property
    def temp_mid(self) -> float:
        return (self.temp_min + self.temp_max) / 2

    def to_wire(self) -> list[Any]:
        return [self.date.isoformat(), self.temp_min, self.temp_max]

    @classmethod
    def from_wire(cls, triple: list[Any]) -> "DayRecord":
        if len(triple) != 3:
            raise ValueError(f"Expected [date, min, max], got {triple!r}")
        d, tmin, tmax = triple
        return cls(date=d, temp_min=tmin, temp_max=tmax)


class Dataset(BaseModel):
    """The ordered daily records of one station-year."""

    station_id: str
    year: int
    unit: str = bc.UNIT_CELSIUS
    days: tuple[DayRecord, ...]

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.days)

    @property
    def key(self) -> "CacheKey":
        return CacheKey(station_id=self.station_id, year=self.year)

    def temp_bounds(self) -> tuple[float, float]:
        """Returns the lowest daily min and the highest daily max of all days."""
        if not self.days:
            raise ValueError(f"Empty dataset {self.station_id}/{self.year}")
        return (
            min(d.temp_min for d in self.days),
            max(d.temp_max for d in self.days),
        )

    def to_wire(self) -> dict[str, Any]:
        """Returns the JSON representation used in data files and HTTP responses."""
        return {
            "station": self.station_id,
            "year": self.year,
            "unit": self.unit,
            "days": [d.to_wire() for d in self.days],
        }

    @classmethod
    def from_wire(cls, obj: dict[str, Any]) -> "Dataset":
        return cls(
            station_id=str(obj["station"]),
            year=int(obj["year"]),
            unit=obj.get("unit", bc.UNIT_CELSIUS),
            days=tuple(DayRecord.from_wire(t) for t in obj["days"]),
        )

    def to_frame(self) -> pd.DataFrame:
        """Returns the days as a DataFrame with a "date" index."""
        df = pd.DataFrame(
            {
                "date": pd.to_datetime([d.date for d in self.days]),
                "temp_min": [d.temp_min for d in self.days],
                "temp_max": [d.temp_max for d in self.days],
            }
        )
        return df.set_index("date")


class CacheKey(BaseModel):
    station_id: str
    year: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.station_id}-{self.year}"


class StationMeta(BaseModel):
    """Station display name and the years for which data files exist."""

    station_id: str
    display_name: str
    available_years: list[int]

    @field_validator("available_years")
    @classmethod
    def _sort_years(cls, years: list[int]) -> list[int]:
        return sorted(years)

    def to_wire(self) -> dict[str, Any]:
        return {
            "station_id": self.station_id,
            "name_en": self.display_name,
            "available_years": self.available_years,
        }

    @classmethod
    def from_wire(cls, obj: dict[str, Any]) -> "StationMeta":
        return cls(
            station_id=str(obj["station_id"]),
            display_name=obj.get("name_en", ""),
            available_years=obj.get("available_years", []),
        )


class SelectedDay(BaseModel):
    """Details of a selected day, as handed to the selection sink."""

    index: int
    date: datetime.date
    temp_min: float
    temp_max: float
    unit: str = bc.UNIT_CELSIUS


################################################################
# Chart state
################################################################


class Viewport(BaseModel):
    """Visible window of a dataset, in fractional day units.

    start_index and visible_count are kept unrounded so that repeated pans
    and zooms do not drift; rendering rounds them to a discrete slice.
    """

    start_index: float = 0.0
    visible_count: float = 0.0
    min_visible: int = bc.MIN_VISIBLE_DAYS

    model_config = ConfigDict(frozen=True)

    @property
    def center(self) -> float:
        return self.start_index + self.visible_count / 2


################################################################
# Render output
################################################################


class Layout(BaseModel):
    """Pixel layout of a rendered frame.

    Interaction code maps pointer coordinates back to data indices
    with it, so it must always come from the most recent render.
    """

    width: float
    height: float
    left: float
    top: float
    right: float
    bottom: float
    bar_width: float
    # Visible slice of the dataset: [start, end).
    start: int
    end: int

    model_config = ConfigDict(frozen=True)

    def bar_center(self, index: int) -> float:
        """Returns the x coordinate of the center of the bar at dataset index."""
        return self.left + (index - self.start) * self.bar_width + self.bar_width / 2


class Line(BaseModel):
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 1.0
    dash: tuple[float, ...] = ()
    tag: str = ""

    model_config = ConfigDict(frozen=True)


class Circle(BaseModel):
    cx: float
    cy: float
    r: float
    fill: str
    stroke: str
    stroke_width: float = 1.0
    tag: str = ""

    model_config = ConfigDict(frozen=True)


class Text(BaseModel):
    x: float
    y: float
    text: str
    color: str
    align: str = "left"  # one of ("left", "center")
    baseline: str = "middle"  # one of ("middle", "top")
    font_size: int = 12
    tag: str = ""

    model_config = ConfigDict(frozen=True)


Primitive = Line | Circle | Text


class Frame(BaseModel):
    """Draw primitives of one render pass, in draw order."""

    primitives: list[Primitive] = []
    layout: Layout | None = None

    def tagged(self, tag: str) -> list[Primitive]:
        return [p for p in self.primitives if p.tag == tag]
