"""Axis ticks with zoom-dependent level of detail."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator

from tui_blobby.layout.scale import DateScale


class LabelLOD(Enum):
    """Which label a tick carries."""

    NONE = "none"
    DAY_NUMBER = "day"
    MONTH = "month"
    MONTH_YEAR = "month_year"


@dataclass(frozen=True)
class LodThresholds:
    day_number: float = 20  # zoom >= : day-of-month numbers
    minor_tick: float = 8  # zoom >= : minor tick marks
    month_year: float = 15  # zoom > : year next to month labels


@dataclass(frozen=True)
class Tick:
    date: date
    x: float
    is_month_start: bool
    lod: LabelLOD
    visible: bool

    @property
    def major(self) -> bool:
        """Month starts draw taller than minor ticks."""
        return self.is_month_start

    @property
    def label(self) -> str:
        if self.lod == LabelLOD.MONTH:
            return self.date.strftime("%b")
        if self.lod == LabelLOD.MONTH_YEAR:
            return self.date.strftime("%b %Y")
        if self.lod == LabelLOD.DAY_NUMBER:
            return str(self.date.day)
        return ""


def make_tick(d: date, scale: DateScale, thresholds: LodThresholds = LodThresholds()) -> Tick:
    zoom = scale.zoom
    x = scale.to_pixel(d)
    if d.day == 1:
        lod = LabelLOD.MONTH_YEAR if zoom > thresholds.month_year else LabelLOD.MONTH
        return Tick(d, x, True, lod, True)
    visible = zoom >= thresholds.minor_tick
    lod = LabelLOD.DAY_NUMBER if visible and zoom >= thresholds.day_number else LabelLOD.NONE
    return Tick(d, x, False, lod, visible)


class TickSequence:
    """One tick per day in ``[window.start, window.end)``.

    Iterating twice yields the same ticks; nothing is cached.
    """

    def __init__(self, scale: DateScale, thresholds: LodThresholds = LodThresholds()) -> None:
        self._scale = scale
        self._thresholds = thresholds

    def __len__(self) -> int:
        return self._scale.total_days

    def __iter__(self) -> Iterator[Tick]:
        start = self._scale.window.start
        for offset in range(self._scale.total_days):
            yield make_tick(start + timedelta(days=offset), self._scale, self._thresholds)

    def visible(self) -> Iterator[Tick]:
        return (tick for tick in self if tick.visible)

    def between(self, x_min: float, x_max: float) -> Iterator[Tick]:
        """Ticks whose x lies in ``[x_min, x_max)`` (for a scrolled viewport)."""
        scale = self._scale
        first = max(0, int(x_min // scale.zoom))
        last = min(scale.total_days, int(x_max // scale.zoom) + 1)
        start = scale.window.start
        for offset in range(first, last):
            tick = make_tick(start + timedelta(days=offset), scale, self._thresholds)
            if x_min <= tick.x < x_max:
                yield tick
