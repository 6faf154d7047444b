"""Timeline canvas custom widget."""

from __future__ import annotations

import math
from datetime import date

from textual.geometry import Size
from textual.message import Message
from textual.scroll_view import ScrollView
from textual.strip import Strip
from textual.widget import Widget

from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from tui_blobby.layout import (
    OutOfWindowPolicy,
    TimelineLayout,
    clamp_scroll,
    compute_centering_scroll,
    lane_top,
    resolve_click_date,
)
from tui_blobby.models import (
    COMPLETED_ICON,
    DEFAULT_DATE_FORMAT,
    DUE_ICON,
    PositionedEvent,
    format_date_display,
    format_with_preset,
)

DUE_COLOR = "#ec4899"
AXIS_COLOR = "grey50"
MONTH_COLOR = "bold grey85"
DAY_COLOR = "grey58"
CARD_MARGIN_PX = 10  # cards are drawn slightly narrower than their lane slot


class TimelineToolbar(Widget):
    """1-line toolbar showing the due date, zoom and clickable zoom buttons."""

    class ZoomRequested(Message):
        def __init__(self, direction: int) -> None:
            super().__init__()
            self.direction = direction

    class RecenterRequested(Message):
        pass

    DEFAULT_CSS = """
    TimelineToolbar {
        height: 1;
        background: $background;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._due_date: date | None = None
        self._zoom: float = 0
        self._button_regions: list[tuple[int, int, str]] = []

    def update_toolbar(self, due_date: date, zoom: float) -> None:
        self._due_date = due_date
        self._zoom = zoom
        self.refresh()

    def render(self) -> Text:
        text = Text()
        if self._due_date is not None:
            text.append(f"DUE: {format_date_display(self._due_date)}", Style(bold=True, color=DUE_COLOR))
        text.append(f"  │ {self._zoom:g}px/day │ ", Style(dim=True))

        self._button_regions = []
        for label, action in ((" − ", "out"), (" + ", "in"), (" ◎ ", "center")):
            start = len(text)
            text.append(label, Style(bold=True, reverse=True))
            self._button_regions.append((start, len(text), action))
            text.append(" ")
        return text

    def on_click(self, event) -> None:
        for start, end, action in self._button_regions:
            if start <= event.x < end:
                if action == "center":
                    self.post_message(self.RecenterRequested())
                else:
                    self.post_message(self.ZoomRequested(1 if action == "in" else -1))
                return


class TimelineCanvas(ScrollView):
    """Scrollable timeline: day/month axis, cue badges, due-date marker and lane-packed cards.

    Layout happens in abstract pixels; one terminal column covers ``cell_px``
    pixels and one line covers ``line_px`` pixels.
    """

    class EventSelected(Message):
        def __init__(self, event_id: str) -> None:
            super().__init__()
            self.event_id = event_id

    class AddEventRequested(Message):
        """Emitted when empty track space is clicked."""

        def __init__(self, date: date) -> None:
            super().__init__()
            self.date = date

    DEFAULT_CSS = """
    TimelineCanvas {
        height: 1fr;
        background: $background;
    }
    """

    def __init__(
        self,
        cell_px: float = 5,
        line_px: float = 20,
        click_policy: OutOfWindowPolicy = OutOfWindowPolicy.ACCEPT,
        date_format: str = DEFAULT_DATE_FORMAT,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.cell_px = cell_px
        self.line_px = line_px
        self.click_policy = click_policy
        self.date_format = date_format
        self._layout: TimelineLayout | None = None
        self._card_lines: dict[int, list[PositionedEvent]] = {}
        self._card_cols: int = 1

    @property
    def timeline_layout(self) -> TimelineLayout | None:
        return self._layout

    # ── Geometry ──

    def _col(self, x: float) -> int:
        return int(math.floor(x / self.cell_px))

    def _line(self, y: float) -> int:
        return int(math.floor(y / self.line_px))

    @property
    def header_lines(self) -> int:
        if self._layout is None:
            return 0
        return max(1, self._line(self._layout.metrics.header_height))

    @property
    def badge_line(self) -> int:
        return self.header_lines

    @property
    def label_line(self) -> int:
        return self.header_lines + 1

    def card_top_line(self, positioned: PositionedEvent) -> int:
        if self._layout is None:
            return 0
        return self._line(lane_top(positioned.lane or 0, self._layout.metrics))

    # ── Data ──

    def update_layout(self, layout: TimelineLayout, recenter: bool = False) -> None:
        self._layout = layout
        self._card_cols = max(4, int((layout.card_width - CARD_MARGIN_PX) // self.cell_px))
        self._card_lines = {}
        for positioned in layout.standard:
            top = self.card_top_line(positioned)
            for line in (top, top + 1):
                self._card_lines.setdefault(line, []).append(positioned)
        self.virtual_size = Size(
            max(1, math.ceil(layout.canvas.width / self.cell_px)),
            max(1, math.ceil(layout.canvas.height / self.line_px)),
        )
        self.refresh()
        if recenter and self.is_mounted:
            # scroll_to clamps against max_scroll_x, which only grows after layout
            self.call_after_refresh(self.center_on, layout.due_date)

    def centering_offset(self, focal: date) -> float:
        """Scroll offset in columns that centres *focal*, clamped to the content."""
        if self._layout is None:
            return 0.0
        viewport_px = self.size.width * self.cell_px
        offset_px = compute_centering_scroll(focal, self._layout.scale, viewport_px)
        offset_px = clamp_scroll(offset_px, self._layout.canvas.width, viewport_px)
        return offset_px / self.cell_px

    def center_on(self, focal: date) -> None:
        if self._layout is None:
            return
        self.scroll_to(x=self.centering_offset(focal), animate=False)

    # ── Hit testing ──

    def event_at(self, col: int, line: int) -> str | None:
        """Id of the card or cue drawn at absolute (col, line), if any."""
        if self._layout is None:
            return None
        if line in (self.badge_line, self.label_line):
            for marker in reversed(self._layout.markers):
                center = self._col(marker.x)
                half = max(1, len(marker.event.title) // 2) if line == self.label_line else 1
                if center - half <= col <= center + half:
                    return marker.id
        for positioned in reversed(self._card_lines.get(line, [])):
            start = self._col(positioned.x)
            if start <= col < start + self._card_cols:
                return positioned.id
        return None

    def resolve_click(self, x: int, y: int) -> str | date | None:
        """Map a viewport cell to an event id, a date to create at, or nothing."""
        if self._layout is None:
            return None
        col = x + int(self.scroll_x)
        line = y + int(self.scroll_y)
        if line < self.header_lines:
            return None
        hit = self.event_at(col, line)
        if hit is not None:
            return hit
        return resolve_click_date(
            client_x=x * self.cell_px,
            container_left=0,
            scroll_left=int(self.scroll_x) * self.cell_px,
            scale=self._layout.scale,
            policy=self.click_policy,
        )

    def on_click(self, event) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        target = self.resolve_click(offset.x, offset.y)
        if isinstance(target, str):
            self.post_message(self.EventSelected(target))
        elif isinstance(target, date):
            self.post_message(self.AddEventRequested(target))

    # ── Rendering ──

    def render_line(self, y: int) -> Strip:
        width = self.size.width
        if self._layout is None or width <= 0:
            return Strip.blank(width)

        x0 = int(self.scroll_x)
        line = y + int(self.scroll_y)
        base = Style()
        cells: list[tuple[str, Style]] = [(" ", base)] * width

        def put(col: int, text: str, style: Style) -> None:
            for i, ch in enumerate(text):
                c = col + i - x0
                if 0 <= c < width:
                    cells[c] = (ch, style)

        if line < self.header_lines:
            self._render_axis(line, x0, width, put)
        else:
            self._render_track(line, put)

        return Strip([Segment(ch, style) for ch, style in cells])

    def _render_axis(self, line: int, x0: int, width: int, put) -> None:
        layout = self._layout
        if layout is None:
            return
        last =self.header_lines - 1
        # Start a little left of the viewport so clipped month labels still show.
        x_min = (x0 - 12) * self.cell_px
        x_max = (x0 + width) * self.cell_px
        if line == last:
            put(x0, "─" * width, Style(color=AXIS_COLOR))
        for tick in layout.ticks.between(x_min, x_max):
            if not tick.visible:
                continue
            col = self._col(tick.x)
            if line == last:
                put(col, "┃" if tick.major else "╵", Style(color=AXIS_COLOR, bold=tick.major))
            elif line == 0 and tick.is_month_start:
                put(col, tick.label, Style.parse(MONTH_COLOR))
            elif line == min(1, last - 1) and not tick.is_month_start and tick.label:
                put(col, tick.label, Style(color=DAY_COLOR))

    def _render_track(self, line: int, put) -> None:
        layout = self._layout
        if layout is None:
            return
        due_col = self._col(layout.due_x)

        if line > self.label_line:
            for marker in layout.markers:
                put(self._col(marker.x), "│", Style(color=marker.event.color, dim=True))
            put(due_col, "│", Style(color=DUE_COLOR, dim=True))

        for positioned in self._card_lines.get(line, []):
            self._render_card(positioned, line, put)

        if line == self.badge_line:
            for marker in layout.markers:
                put(self._col(marker.x), marker.event.glyph, Style(color=marker.event.color, bold=True))
            put(due_col, DUE_ICON, Style(color=DUE_COLOR, bold=True))
        elif line == self.label_line:
            for marker in layout.markers:
                label = f" {marker.event.title} "
                put(self._col(marker.x) - len(label) // 2, label, Style(color=marker.event.color, bold=True))
            due_label = f" DUE: {format_date_display(layout.due_date)} "
            put(due_col - len(due_label) // 2, due_label, Style(color=DUE_COLOR, bold=True, reverse=True))

    def _render_card(self, positioned: PositionedEvent, line: int, put) -> None:
        event = positioned.event
        col = self._col(positioned.x)
        inner = self._card_cols - 1
        done = event.is_completed
        edge = Style(color="grey62" if done else event.color)
        if line == self.card_top_line(positioned):
            prefix = f"{COMPLETED_ICON} " if done else ""
            text = (prefix + event.title)[:inner].ljust(inner)
            style = Style(dim=True, strike=True) if done else Style(bold=True)
        else:
            text = format_with_preset(event.date, self.date_format)[:inner].ljust(inner)
            style = Style(dim=True)
        put(col, "▌", edge)
        put(col + 1, text, style)
