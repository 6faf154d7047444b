"""Explicit layout recomputation driven by invalidation events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Iterable

from tui_blobby.layout.lanes import CARD_WIDTH, LANE_GUTTER, EventLayout, layout_events
from tui_blobby.layout.scale import (
    DEFAULT_ZOOM,
    MAX_ZOOM,
    MIN_ZOOM,
    ZOOM_STEP,
    DateScale,
    clamp_zoom,
    step_zoom,
)
from tui_blobby.layout.ticks import LodThresholds, TickSequence
from tui_blobby.layout.viewport import (
    CanvasMetrics,
    CanvasSize,
    compute_canvas_size,
    compute_centering_scroll,
)
from tui_blobby.models import PositionedEvent, TimeWindow, TimelineEvent


class Invalidation(Enum):
    """Changes that make the current layout stale."""

    EVENTS_CHANGED = "events"
    ZOOM_CHANGED = "zoom"
    DUE_DATE_CHANGED = "due_date"
    WINDOW_RESIZED = "resize"

    @property
    def recenters(self) -> bool:
        """Whether the viewport should be re-centred on the due date."""
        return self in (Invalidation.ZOOM_CHANGED, Invalidation.DUE_DATE_CHANGED)


@dataclass(frozen=True)
class TimelineLayout:
    """Immutable result of one layout pass."""

    scale: DateScale
    events: EventLayout
    due_date: date
    canvas: CanvasSize
    ticks: TickSequence
    metrics: CanvasMetrics
    card_width: float

    @property
    def standard(self) -> list[PositionedEvent]:
        return self.events.standard

    @property
    def markers(self) -> list[PositionedEvent]:
        return self.events.markers

    @property
    def max_lane(self) -> int:
        return self.events.max_lane

    @property
    def due_x(self) -> float:
        return self.scale.to_pixel(self.due_date)

    def centering_scroll(self, viewport_width: float) -> float:
        return compute_centering_scroll(self.due_date, self.scale, viewport_width)


def build_layout(
    events: Iterable[TimelineEvent],
    due_date: date,
    scale: DateScale,
    metrics: CanvasMetrics = CanvasMetrics(),
    thresholds: LodThresholds = LodThresholds(),
    card_width: float = CARD_WIDTH,
    gutter: float = LANE_GUTTER,
) -> TimelineLayout:
    event_layout = layout_events(events, scale, card_width, gutter)
    return TimelineLayout(
        scale=scale,
        events=event_layout,
        due_date=due_date,
        canvas=compute_canvas_size(scale, event_layout.max_lane, metrics),
        ticks=TickSequence(scale, thresholds),
        metrics=metrics,
        card_width=card_width,
    )


LayoutListener = Callable[[Invalidation, TimelineLayout], None]


class TimelineLayoutEngine:
    """Owns zoom, events and due date; recomputes the layout on each change.

    Every mutator recomputes from scratch and notifies subscribers with the
    reason and the new layout. A bad window raises ``ConfigurationError``
    here, at construction.
    """

    def __init__(
        self,
        window: TimeWindow,
        due_date: date,
        zoom: float = DEFAULT_ZOOM,
        metrics: CanvasMetrics = CanvasMetrics(),
        thresholds: LodThresholds = LodThresholds(),
        card_width: float = CARD_WIDTH,
        gutter: float = LANE_GUTTER,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
        zoom_step: float = ZOOM_STEP,
    ) -> None:
        self._scale = DateScale(window, clamp_zoom(zoom, min_zoom, max_zoom), min_zoom, max_zoom)
        self._due_date = due_date
        self._events: tuple[TimelineEvent, ...] = ()
        self._metrics = metrics
        self._thresholds = thresholds
        self._card_width = card_width
        self._gutter = gutter
        self._zoom_step = zoom_step
        self._viewport_width: float = 0
        self._listeners: list[LayoutListener] = []
        self._layout = self._compute()

    @property
    def layout(self) -> TimelineLayout:
        return self._layout

    @property
    def scale(self) -> DateScale:
        return self._scale

    @property
    def zoom(self) -> float:
        return self._scale.zoom

    @property
    def due_date(self) -> date:
        return self._due_date

    @property
    def viewport_width(self) -> float:
        return self._viewport_width

    def subscribe(self, listener: LayoutListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_events(self, events: Iterable[TimelineEvent]) -> None:
        self._events = tuple(events)
        self._invalidate(Invalidation.EVENTS_CHANGED)

    def set_due_date(self, due_date: date) -> None:
        self._due_date = due_date
        self._invalidate(Invalidation.DUE_DATE_CHANGED)

    def set_zoom(self, zoom: float) -> None:
        self._scale = self._scale.with_zoom(
            clamp_zoom(zoom, self._scale.min_zoom, self._scale.max_zoom)
        )
        self._invalidate(Invalidation.ZOOM_CHANGED)

    def zoom_in(self) -> None:
        self._step(self._zoom_step)

    def zoom_out(self) -> None:
        self._step(-self._zoom_step)

    def _step(self, delta: float) -> None:
        self.set_zoom(step_zoom(self.zoom, delta, self._scale.min_zoom, self._scale.max_zoom))

    def resize(self, viewport_width: float) -> None:
        self._viewport_width = viewport_width
        self._invalidate(Invalidation.WINDOW_RESIZED)

    def centering_scroll(self) -> float:
        return self._layout.centering_scroll(self._viewport_width)

    def _compute(self) -> TimelineLayout:
        return build_layout(
            self._events,
            self._due_date,
            self._scale,
            self._metrics,
            self._thresholds,
            self._card_width,
            self._gutter,
        )

    def _invalidate(self, reason: Invalidation) -> None:
        self._layout = self._compute()
        for listener in list(self._listeners):
            listener(reason, self._layout)
