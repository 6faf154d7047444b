"""Linear date <-> pixel mapping over a fixed time window."""

from __future__ import annotations

import math
from datetime import date, timedelta

from tui_blobby.models import TimeWindow, days_between

MIN_ZOOM = 5
MAX_ZOOM = 100
DEFAULT_ZOOM = 25
ZOOM_STEP = 5


class ConfigurationError(ValueError):
    """Raised when a timeline cannot be set up (bad window or zoom)."""


def clamp_zoom(zoom: float, min_zoom: float = MIN_ZOOM, max_zoom: float = MAX_ZOOM) -> float:
    """Clamp a requested zoom (pixels per day) into the allowed bounds."""
    return max(min_zoom, min(max_zoom, zoom))


def step_zoom(
    current: float, delta: float, min_zoom: float = MIN_ZOOM, max_zoom: float = MAX_ZOOM
) -> float:
    """Zoom in (+delta) or out (-delta), clamped."""
    return clamp_zoom(current + delta, min_zoom, max_zoom)


class DateScale:
    """Maps calendar dates to horizontal offsets at a given zoom.

    ``x = days_since(window.start, date) * zoom`` and its inverse
    ``date = window.start + round(x / zoom)``. Instances are immutable;
    use :meth:`with_zoom` to rescale.

    Dates are assumed valid; parsing problems belong to whoever produced the
    date. Dates outside the window map outside ``[0, total_width]``.
    """

    __slots__ = ("_window", "_zoom", "_min_zoom", "_max_zoom", "_total_days")

    def __init__(
        self,
        window: TimeWindow,
        zoom: float = DEFAULT_ZOOM,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
    ) -> None:
        total_days = math.ceil(days_between(window.start, window.end))
        if total_days <= 0:
            raise ConfigurationError(
                f"Time window must end after it starts: {window.start} .. {window.end}"
            )
        if min_zoom <= 0 or min_zoom > max_zoom:
            raise ConfigurationError(f"Invalid zoom bounds: [{min_zoom}, {max_zoom}]")
        if not (min_zoom <= zoom <= max_zoom):
            raise ConfigurationError(
                f"Zoom {zoom} outside allowed bounds [{min_zoom}, {max_zoom}]"
            )
        self._window = window
        self._zoom = zoom
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._total_days = total_days

    def __repr__(self) -> str:
        return f"DateScale({self._window.start}..{self._window.end}, zoom={self._zoom})"

    @property
    def window(self) -> TimeWindow:
        return self._window

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def min_zoom(self) -> float:
        return self._min_zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    @property
    def total_days(self) -> int:
        return self._total_days

    @property
    def total_width(self) -> float:
        return self._total_days * self._zoom

    def to_pixel(self, d: date) -> float:
        return days_between(self._window.start, d) * self._zoom

    def to_date(self, x: float) -> date:
        # Half-up, so a click exactly between two days picks the later one.
        return self._window.start + timedelta(days=math.floor(x / self._zoom + 0.5))

    def with_zoom(self, zoom: float) -> DateScale:
        return DateScale(self._window, zoom, self._min_zoom, self._max_zoom)
