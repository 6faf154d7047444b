"""Greedy lane packing for point-in-time event cards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable

from tui_blobby.layout.scale import DateScale
from tui_blobby.models import PositionedEvent, TimelineEvent

CARD_WIDTH = 160
LANE_GUTTER = 10


@dataclass(frozen=True)
class LaneAssignment:
    """Lane index per input item, in input order."""

    lanes: tuple[int, ...] = ()
    keys: tuple[Hashable, ...] = ()

    @property
    def lane_count(self) -> int:
        return max(self.lanes) + 1 if self.lanes else 0

    def as_dict(self) -> dict[Hashable, int]:
        return dict(zip(self.keys, self.lanes))


def assign_lanes(
    items: Iterable[tuple[Hashable, float]],
    width: float = CARD_WIDTH,
    gutter: float = LANE_GUTTER,
) -> LaneAssignment:
    """Assign each ``(key, x)`` item the lowest lane it fits in.

    Items must already be in ascending date order. An item fits in lane *i*
    when ``lane_ends[i] + gutter < x``; otherwise a new lane is opened.
    """
    lane_ends: list[float] = []  # right edge of the last card in each lane
    keys: list[Hashable] = []
    lanes: list[int] = []
    for key, x in items:
        lane = next(
            (i for i, end in enumerate(lane_ends) if end + gutter < x),
            len(lane_ends),
        )
        if lane == len(lane_ends):
            lane_ends.append(x + width)
        else:
            lane_ends[lane] = x + width
        keys.append(key)
        lanes.append(lane)
    return LaneAssignment(lanes=tuple(lanes), keys=tuple(keys))


@dataclass(frozen=True)
class EventLayout:
    """Result of one layout pass over the event list."""

    standard: list[PositionedEvent] = field(default_factory=list)
    markers: list[PositionedEvent] = field(default_factory=list)

    @property
    def lane_count(self) -> int:
        if not self.standard:
            return 0
        return max(p.lane or 0 for p in self.standard) + 1

    @property
    def max_lane(self) -> int:
        """Highest lane index in use; 0 when there are no cards."""
        return max(0, self.lane_count - 1)


def layout_events(
    events: Iterable[TimelineEvent],
    scale: DateScale,
    width: float = CARD_WIDTH,
    gutter: float = LANE_GUTTER,
) -> EventLayout:
    """Position every event and pack standard cards into lanes.

    Markers bypass lane assignment. Standard events are stably sorted by
    date, so events sharing a date keep their list order.
    """
    standard: list[TimelineEvent] = []
    markers: list[PositionedEvent] = []
    for event in events:
        if event.is_marker:
            markers.append(PositionedEvent(event, scale.to_pixel(event.date)))
        else:
            standard.append(event)

    ordered = sorted(standard, key=lambda e: e.date)
    xs = [scale.to_pixel(e.date) for e in ordered]
    assignment = assign_lanes(zip(range(len(ordered)), xs), width, gutter)
    positioned = [
        PositionedEvent(event, x, lane)
        for event, x, lane in zip(ordered, xs, assignment.lanes)
    ]
    return EventLayout(standard=positioned, markers=markers)
