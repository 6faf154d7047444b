"""Data models for TUI Blobby."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum


class EventCategory(Enum):
    """Timeline event category."""

    MILESTONE = "MILESTONE"
    TODO = "TODO"
    MEDICAL = "MEDICAL"
    FACT = "FACT"
    OTHER = "OTHER"


class EventType(Enum):
    """Standard cards are lane-packed; markers render at a fixed row."""

    STANDARD = "standard"
    MARKER = "marker"


class IconName(Enum):
    """Icons available for visual cues (markers)."""

    BABY = "baby"
    STAR = "star"
    HEART = "heart"
    CHECK = "check"
    ALERT = "alert"
    GIFT = "gift"
    FLAG = "flag"
    CALENDAR = "calendar"
    ZAP = "zap"

    @property
    def glyph(self) -> str:
        return ICON_GLYPHS[self]


ICON_GLYPHS: dict[IconName, str] = {
    IconName.BABY: "☺",
    IconName.STAR: "★",
    IconName.HEART: "♥",
    IconName.CHECK: "✔",
    IconName.ALERT: "!",
    IconName.GIFT: "♦",
    IconName.FLAG: "⚑",
    IconName.CALENDAR: "▦",
    IconName.ZAP: "ϟ",
}

AVAILABLE_ICONS: list[IconName] = [
    IconName.BABY, IconName.STAR, IconName.HEART, IconName.FLAG, IconName.ALERT,
    IconName.GIFT, IconName.CALENDAR, IconName.ZAP, IconName.CHECK,
]

DEFAULT_COLORS: dict[EventCategory, str] = {
    EventCategory.MILESTONE: "#f59e0b",  # amber
    EventCategory.TODO: "#3b82f6",  # blue
    EventCategory.MEDICAL: "#8b5cf6",  # violet
    EventCategory.FACT: "#ef4444",  # red
    EventCategory.OTHER: "#10b981",  # emerald
}

CATEGORY_LABELS: dict[EventCategory, str] = {
    EventCategory.MILESTONE: "Milestones",
    EventCategory.TODO: "To-Dos",
    EventCategory.MEDICAL: "Medical",
    EventCategory.FACT: "Facts",
    EventCategory.OTHER: "Other",
}

COMPLETED_ICON = "✔"
DUE_ICON = "☺"


# ── Calendar dates ──────────────────────────────────────────────


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` (or an ISO datetime) into a naive calendar date.

    Only the calendar part is kept; ``2026-02-14T00:00:00.000Z`` parses as
    2026-02-14. Raises ``ValueError`` on malformed input.
    """
    text = str(value).strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    return date.fromisoformat(text)


def format_date(d: date) -> str:
    """Return ``YYYY-MM-DD``."""
    return d.isoformat()


def format_date_display(d: date | str) -> str:
    """Return ``DD/MM/YYYY`` for display."""
    if isinstance(d, str):
        d = parse_date(d)
    return d.strftime("%d/%m/%Y")


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Signed whole-day difference ``end - start``."""
    return (end - start).days


@dataclass(frozen=True)
class TimeWindow:
    """Addressable timeline range. Validated by the scale, not here."""

    start: date
    end: date

    @property
    def total_days(self) -> int:
        return days_between(self.start, self.end)

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def clamp(self, d: date) -> date:
        return min(max(d, self.start), self.end)


DEFAULT_WINDOW = TimeWindow(date(2025, 12, 1), date(2028, 12, 31))
DEFAULT_DUE_DATE = date(2026, 2, 14)


# ── Events ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimelineEvent:
    """A single dated item on the timeline. Immutable; edit with dataclasses.replace()."""

    title: str
    date: date
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    category: EventCategory = EventCategory.TODO
    color: str = ""
    is_completed: bool = False
    type: EventType = EventType.STANDARD
    icon: IconName | None = None
    end_date: date | None = None  # stored only, never laid out

    def __post_init__(self) -> None:
        if not self.color:
            object.__setattr__(self, "color", DEFAULT_COLORS[self.category])

    @property
    def is_marker(self) -> bool:
        return self.type == EventType.MARKER

    @property
    def glyph(self) -> str:
        """Marker glyph; missing icons render as a star."""
        return (self.icon or IconName.STAR).glyph

    def toggled(self) -> TimelineEvent:
        """Return a copy with the completion flag flipped."""
        return replace(self, is_completed=not self.is_completed)


@dataclass(frozen=True)
class PositionedEvent:
    """Render-time projection of an event. Never persisted."""

    event: TimelineEvent
    x: float
    lane: int | None = None

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def date(self) -> date:
        return self.event.date


@dataclass
class Snapshot:
    """Persisted application state."""

    due_date: date
    events: list[TimelineEvent] = field(default_factory=list)
    last_saved: datetime | None = None


@dataclass
class EventStats:
    """Header counters."""

    milestones: int = 0
    todos: int = 0
    completed_todos: int = 0
    facts: int = 0


def compute_stats(events: list[TimelineEvent]) -> EventStats:
    stats = EventStats()
    for event in events:
        if event.category == EventCategory.MILESTONE:
            stats.milestones += 1
        elif event.category == EventCategory.TODO:
            stats.todos += 1
            if event.is_completed:
                stats.completed_todos += 1
        elif event.category == EventCategory.FACT:
            stats.facts += 1
    return stats


def events_in_category(events: list[TimelineEvent], category: EventCategory) -> list[TimelineEvent]:
    """Events of one category in date order (stable for equal dates)."""
    return sorted((e for e in events if e.category == category), key=lambda e: e.date)


def upsert_event(events: list[TimelineEvent], event: TimelineEvent) -> list[TimelineEvent]:
    """Replace the event with the same id, or append it."""
    if any(e.id == event.id for e in events):
        return [event if e.id == event.id else e for e in events]
    return [*events, event]


def remove_event(events: list[TimelineEvent], event_id: str) -> list[TimelineEvent]:
    return [e for e in events if e.id != event_id]


def toggle_event(events: list[TimelineEvent], event_id: str) -> list[TimelineEvent]:
    return [e.toggled() if e.id == event_id else e for e in events]


# ── Configuration ───────────────────────────────────────────────

DATE_FORMAT_PRESETS: dict[str, str] = {
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD/MM/YYYY": "%d/%m/%Y",
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MMM DD, YYYY": "%b %d, %Y",
}
DEFAULT_DATE_FORMAT = "DD/MM/YYYY"


def format_with_preset(d: date, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date with a named preset; unknown presets fall back to ISO."""
    fmt = DATE_FORMAT_PRESETS.get(date_format)
    if fmt is None:
        return d.isoformat()
    return d.strftime(fmt)


@dataclass
class ProjectConfig:
    """Project-level configuration stored in .tui-blobby/config.toml."""

    name: str = ""
    date_format: str = DEFAULT_DATE_FORMAT
    zoom: float = 25
    window: TimeWindow = DEFAULT_WINDOW
