"""Viewport state transitions and gesture decoding for the candle chart.

The module-level functions (load, pan, zoom, clamp, ...) are pure
transitions over a frozen Viewport. ChartController owns one chart
surface: it decodes input events into those transitions, keeps the
selection, and re-renders after every state change.
"""

import logging
import math
from typing import Callable
from pydantic import BaseModel

from service.tempchart import render as rp
from service.tempchart.base import constants as bc
from service.tempchart.models import Dataset, Frame, Layout, SelectedDay, Viewport

logger = logging.getLogger("viewport")

# Zoom amount of a single wheel tick.
WHEEL_ZOOM_STEP = 0.1
# Zoom amount per pixel of change in the distance between two touch points.
PINCH_SENSITIVITY = 0.002


def clamp(vp: Viewport, total: int) -> Viewport:
    """Restores the viewport invariants for a dataset of `total` days.

    The visible count is capped first, so that the start position can
    always be pulled back into range afterwards.
    """
    start = vp.start_index
    count = vp.visible_count
    if count > total:
        count = total
    if start < 0:
        start = 0
    if start + count > total:
        start = total - count
    return vp.model_copy(
        update={"start_index": float(start), "visible_count": float(count)}
    )


def load(vp: Viewport, total: int) -> Viewport:
    """Shows the full dataset, the entry state for every newly loaded dataset."""
    return vp.model_copy(update={"start_index": 0.0, "visible_count": float(total)})


# Resetting the zoom shows the full dataset again.
reset = load


def pan(vp: Viewport, total: int, delta_px: float, layout: Layout | None) -> Viewport:
    """Moves the window by delta_px pixels, using the last rendered bar width.

    Dragging to the right (positive delta) reveals earlier days.
    Without a rendered layout there is no pixel mapping, and vp is returned as is.
    """
    if layout is None or layout.bar_width <= 0:
        return vp
    bars = delta_px / layout.bar_width
    return clamp(vp.model_copy(update={"start_index": vp.start_index - bars}), total)


def zoom(vp: Viewport, total: int, amount: float) -> Viewport:
    """Narrows (amount > 0) or widens (amount < 0) the window around its center.

    The new count is bounded to [min_visible, total]. The old center is
    kept, unless clamping the window to the data range moves it.
    """
    if total <= 0:
        return vp
    count = vp.visible_count * (1 - amount)
    count = max(vp.min_visible, min(total, count))
    start = vp.center - count / 2
    return clamp(
        vp.model_copy(update={"start_index": start, "visible_count": count}), total
    )


def hit_test(layout: Layout | None, screen_x: float, total: int) -> int | None:
    """Returns the dataset index under screen_x, or None.

    Pointer positions routinely fall into the padding around the plot,
    so misses are not errors. Only days of the rendered slice can be hit.
    """
    if layout is None or layout.bar_width <= 0:
        return None
    if not layout.left <= screen_x < layout.width - layout.right:
        return None
    index = layout.start + math.floor((screen_x - layout.left) / layout.bar_width)
    if layout.start <= index < min(layout.end, total):
        return index
    return None


################################################################
# Input events
################################################################


class Touch(BaseModel):
    x: float
    y: float


class PointerDown(BaseModel):
    x: float


class PointerMove(BaseModel):
    x: float


class PointerUp(BaseModel):
    pass


class Click(BaseModel):
    x: float


class Wheel(BaseModel):
    delta_y: float


class TouchStart(BaseModel):
    touches: list[Touch]


class TouchMove(BaseModel):
    touches: list[Touch]


class TouchEnd(BaseModel):
    # The touches still on the surface after the end event.
    touches: list[Touch] = []


class Resize(BaseModel):
    width: float
    height: float


InputEvent = (
    PointerDown
    | PointerMove
    | PointerUp
    | Click
    | Wheel
    | TouchStart
    | TouchMove
    | TouchEnd
    | Resize
)


def touch_distance(touches: list[Touch]) -> float:
    """Returns the distance between the first two touch points."""
    a, b = touches[0], touches[1]
    return math.hypot(a.x - b.x, a.y - b.y)


class ChartController:
    """Interaction state of one chart surface.

    All methods that change what is shown return the freshly rendered
    Frame, or None if nothing changed. The layout of that frame is kept
    for mapping the next pointer positions.
    """

    def __init__(
        self,
        width: float,
        height: float,
        min_visible: int = bc.MIN_VISIBLE_DAYS,
        on_select: Callable[[SelectedDay], None] | None = None,
    ):
        self.width = width
        self.height = height
        self.dataset: Dataset | None = None
        self.viewport = Viewport(min_visible=min_visible)
        self.selected_index: int | None = None
        self.layout: Layout | None = None
        self.on_select = on_select

        self._dragging = False
        # Set once a drag actually moved, to suppress the click ending it.
        self._drag_moved = False
        self._last_x = 0.0
        self._pinching = False
        self._last_distance = 0.0

    @property
    def total(self) -> int:
        return len(self.dataset.days) if self.dataset is not None else 0

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    @property
    def is_pinching(self) -> bool:
        return self._pinching

    def render(self) -> Frame | None:
        if self.dataset is None:
            return None
        frame = rp.render(
            self.dataset,
            self.viewport,
            self.selected_index,
            self.width,
            self.height,
        )
        self.layout = frame.layout
        return frame

    def set_dataset(self, dataset: Dataset) -> Frame | None:
        """Shows a new dataset: full view, no selection."""
        self.dataset = dataset
        self.selected_index = None
        self.viewport = load(self.viewport, self.total)
        return self.render()

    def resize(self, width: float, height: float) -> Frame | None:
        self.width = width
        self.height = height
        return self.render()

    def pan_by(self, delta_px: float) -> Frame | None:
        if self.dataset is None:
            return None
        self.viewport = pan(self.viewport, self.total, delta_px, self.layout)
        return self.render()

    def zoom_by(self, amount: float) -> Frame | None:
        if self.dataset is None:
            return None
        logger.debug(
            "Zooming by %.3f, visible count %.1f", amount, self.viewport.visible_count
        )
        self.viewport = zoom(self.viewport, self.total, amount)
        return self.render()

    def reset_zoom(self) -> Frame | None:
        if self.dataset is None:
            return None
        self.viewport = reset(self.viewport, self.total)
        return self.render()

    def select_index(self, index: int) -> Frame | None:
        """Selects the day at dataset index. Out of range indices are ignored."""
        if self.dataset is None or not 0 <= index < self.total:
            return None
        self.selected_index = index
        if self.on_select is not None:
            day = self.dataset.days[index]
            self.on_select(
                SelectedDay(
                    index=index,
                    date=day.date,
                    temp_min=day.temp_min,
                    temp_max=day.temp_max,
                    unit=self.dataset.unit,
                )
            )
        return self.render()

    def select_at(self, screen_x: float) -> Frame | None:
        index = hit_test(self.layout, screen_x, self.total)
        if index is None:
            return None
        return self.select_index(index)

    def _start_drag(self, x: float):
        self._dragging = True
        self._drag_moved = False
        self._last_x = x

    def _drag(self, x: float) -> Frame | None:
        if not self._dragging:
            return None
        dx = x - self._last_x
        self._last_x = x
        if dx == 0:
            return None
        self._drag_moved = True
        return self.pan_by(dx)

    def dispatch(self, event: InputEvent) -> Frame | None:
        if isinstance(event, PointerDown):
            self._start_drag(event.x)
            return None
        elif isinstance(event, PointerMove):
            return self._drag(event.x)
        elif isinstance(event, PointerUp):
            self._dragging = False
            return None
        elif isinstance(event, Click):
            if self._dragging or self._drag_moved:
                self._drag_moved = False
                return None
            return self.select_at(event.x)
        elif isinstance(event, Wheel):
            if event.delta_y > 0:
                return self.zoom_by(-WHEEL_ZOOM_STEP)
            elif event.delta_y < 0:
                return self.zoom_by(WHEEL_ZOOM_STEP)
            return None
        elif isinstance(event, TouchStart):
            if len(event.touches) == 1:
                self._start_drag(event.touches[0].x)
            elif len(event.touches) >= 2:
                # A second finger turns the gesture into a pinch, not a pan.
                self._dragging = False
                self._pinching = True
                self._last_distance = touch_distance(event.touches)
            return None
        elif isinstance(event, TouchMove):
            if len(event.touches) == 1 and not self._pinching:
                return self._drag(event.touches[0].x)
            elif len(event.touches) >= 2 and self._pinching:
                dist = touch_distance(event.touches)
                delta = dist - self._last_distance
                self._last_distance = dist
                if delta == 0:
                    return None
                # Fingers moving apart zoom in.
                return self.zoom_by(delta * PINCH_SENSITIVITY)
            return None
        elif isinstance(event, TouchEnd):
            self._dragging = False
            if len(event.touches) < 2:
                self._pinching = False
            return None
        elif isinstance(event, Resize):
            return self.resize(event.width, event.height)
        raise ValueError(f"Unhandled input event: {event!r}")
