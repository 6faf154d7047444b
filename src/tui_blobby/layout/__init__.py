"""Timeline layout and coordinate mapping."""

from tui_blobby.layout.engine import (
    Invalidation,
    TimelineLayout,
    TimelineLayoutEngine,
    build_layout,
)
from tui_blobby.layout.interaction import OutOfWindowPolicy, pixel_to_date, resolve_click_date
from tui_blobby.layout.lanes import (
    CARD_WIDTH,
    LANE_GUTTER,
    EventLayout,
    LaneAssignment,
    assign_lanes,
    layout_events,
)
from tui_blobby.layout.scale import (
    DEFAULT_ZOOM,
    MAX_ZOOM,
    MIN_ZOOM,
    ZOOM_STEP,
    ConfigurationError,
    DateScale,
    clamp_zoom,
    step_zoom,
)
from tui_blobby.layout.ticks import LabelLOD, LodThresholds, Tick, TickSequence
from tui_blobby.layout.viewport import (
    CanvasMetrics,
    CanvasSize,
    clamp_scroll,
    compute_canvas_size,
    compute_centering_scroll,
    lane_top,
)

__all__ = [
    "CARD_WIDTH",
    "DEFAULT_ZOOM",
    "LANE_GUTTER",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "ZOOM_STEP",
    "CanvasMetrics",
    "CanvasSize",
    "ConfigurationError",
    "DateScale",
    "EventLayout",
    "Invalidation",
    "LabelLOD",
    "LaneAssignment",
    "LodThresholds",
    "OutOfWindowPolicy",
    "Tick",
    "TickSequence",
    "TimelineLayout",
    "TimelineLayoutEngine",
    "assign_lanes",
    "build_layout",
    "clamp_scroll",
    "clamp_zoom",
    "compute_canvas_size",
    "compute_centering_scroll",
    "lane_top",
    "layout_events",
    "pixel_to_date",
    "resolve_click_date",
    "step_zoom",
]
