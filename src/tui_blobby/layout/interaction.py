"""Pointer position -> calendar date."""

from __future__ import annotations

from datetime import date
from enum import Enum

from tui_blobby.layout.scale import DateScale


class OutOfWindowPolicy(Enum):
    """What to do with a click that resolves outside the time window."""

    ACCEPT = "accept"
    CLAMP = "clamp"
    REJECT = "reject"


def pixel_to_date(
    client_x: float, container_left: float, scroll_left: float, scale: DateScale
) -> date:
    """Resolve a click to a date. Out-of-window dates pass through unchanged."""
    local_x = client_x - container_left + scroll_left
    return scale.to_date(local_x)


def resolve_click_date(
    client_x: float,
    container_left: float,
    scroll_left: float,
    scale: DateScale,
    policy: OutOfWindowPolicy = OutOfWindowPolicy.ACCEPT,
) -> date | None:
    """Like :func:`pixel_to_date`, applying *policy* to out-of-window results.

    Returns ``None`` only under ``REJECT``.
    """
    clicked = pixel_to_date(client_x, container_left, scroll_left, scale)
    window = scale.window
    if window.contains(clicked) or policy == OutOfWindowPolicy.ACCEPT:
        return clicked
    if policy == OutOfWindowPolicy.CLAMP:
        return window.clamp(clicked)
    return None
