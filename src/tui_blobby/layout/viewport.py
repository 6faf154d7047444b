"""Canvas dimensions and scroll centering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import NamedTuple

from tui_blobby.layout.scale import DateScale


@dataclass(frozen=True)
class CanvasMetrics:
    """Vertical geometry supplied by the host surface."""

    header_height: float = 50
    top_padding: float = 40  # room for the floating due-date and cue badges
    row_height: float = 60
    buffer_margin: float = 200


class CanvasSize(NamedTuple):
    width: float
    height: float


def compute_canvas_size(
    scale: DateScale, max_lane_index: int, metrics: CanvasMetrics = CanvasMetrics()
) -> CanvasSize:
    height = (
        metrics.header_height
        + metrics.top_padding
        + (max_lane_index + 1) * metrics.row_height
        + metrics.buffer_margin
    )
    return CanvasSize(scale.total_width, height)


def lane_top(lane: int, metrics: CanvasMetrics = CanvasMetrics()) -> float:
    """Y offset of the top of a card placed in *lane*."""
    return metrics.header_height + metrics.top_padding + lane * metrics.row_height


def compute_centering_scroll(focal_date: date, scale: DateScale, viewport_width: float) -> float:
    """Scroll offset that puts *focal_date* in the middle of the viewport.

    Not clamped; see :func:`clamp_scroll`.
    """
    return scale.to_pixel(focal_date) - viewport_width / 2


def clamp_scroll(offset: float, content_width: float, viewport_width: float) -> float:
    """Clamp a scroll offset into ``[0, content_width - viewport_width]``."""
    return max(0.0, min(offset, max(0.0, content_width - viewport_width)))
