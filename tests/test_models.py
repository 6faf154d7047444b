"""Tests for data models."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from tui_blobby.models import (
    DEFAULT_COLORS,
    EventCategory,
    EventType,
    IconName,
    TimeWindow,
    TimelineEvent,
    compute_stats,
    days_between,
    events_in_category,
    format_date_display,
    format_with_preset,
    parse_date,
    remove_event,
    toggle_event,
    upsert_event,
)


class TestDates:
    def test_parse_plain(self):
        assert parse_date("2026-02-14") == date(2026, 2, 14)

    def test_parse_iso_datetime_keeps_calendar_day(self):
        assert parse_date("2026-02-14T23:30:00.000Z") == date(2026, 2, 14)

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            parse_date("14/02/2026")

    def test_display(self):
        assert format_date_display(date(2026, 2, 4)) == "04/02/2026"
        assert format_date_display("2026-02-04") == "04/02/2026"

    def test_days_between_signed(self):
        assert days_between(date(2026, 1, 1), date(2026, 1, 11)) == 10
        assert days_between(date(2026, 1, 11), date(2026, 1, 1)) == -10

    def test_days_between_across_leap_day(self):
        assert days_between(date(2028, 2, 28), date(2028, 3, 1)) == 2

    def test_presets(self):
        d = date(2026, 2, 14)
        assert format_with_preset(d, "YYYY-MM-DD") == "2026-02-14"
        assert format_with_preset(d, "MM/DD/YYYY") == "02/14/2026"
        assert format_with_preset(d, "nonsense") == "2026-02-14"


class TestTimeWindow:
    def test_contains_is_inclusive(self):
        window = TimeWindow(date(2026, 1, 1), date(2026, 12, 31))
        assert window.contains(date(2026, 1, 1))
        assert window.contains(date(2026, 12, 31))
        assert not window.contains(date(2027, 1, 1))

    def test_clamp(self):
        window = TimeWindow(date(2026, 1, 1), date(2026, 12, 31))
        assert window.clamp(date(2025, 6, 1)) == date(2026, 1, 1)
        assert window.clamp(date(2027, 6, 1)) == date(2026, 12, 31)
        assert window.clamp(date(2026, 6, 1)) == date(2026, 6, 1)


class TestTimelineEvent:
    def test_defaults(self):
        event = TimelineEvent(title="Buy crib", date=date(2026, 1, 5))
        assert event.category == EventCategory.TODO
        assert event.color == DEFAULT_COLORS[EventCategory.TODO]
        assert event.type == EventType.STANDARD
        assert not event.is_completed
        assert not event.is_marker
        assert event.id

    def test_unique_ids(self):
        a = TimelineEvent(title="a", date=date(2026, 1, 5))
        b = TimelineEvent(title="a", date=date(2026, 1, 5))
        assert a.id != b.id

    def test_color_follows_category(self):
        event = TimelineEvent(title="Scan", date=date(2026, 1, 5), category=EventCategory.MEDICAL)
        assert event.color == DEFAULT_COLORS[EventCategory.MEDICAL]

    def test_explicit_color_kept(self):
        event = TimelineEvent(title="x", date=date(2026, 1, 5), color="#123456")
        assert event.color == "#123456"

    def test_frozen(self):
        event = TimelineEvent(title="x", date=date(2026, 1, 5))
        with pytest.raises(FrozenInstanceError):
            event.title = "y"

    def test_marker_glyph(self):
        cue = TimelineEvent(title="Shower", date=date(2026, 1, 5), type=EventType.MARKER, icon=IconName.HEART)
        assert cue.is_marker
        assert cue.glyph == "♥"

    def test_missing_icon_is_star(self):
        cue = TimelineEvent(title="Shower", date=date(2026, 1, 5), type=EventType.MARKER)
        assert cue.glyph == IconName.STAR.glyph

    def test_toggled(self):
        event = TimelineEvent(title="x", date=date(2026, 1, 5))
        assert event.toggled().is_completed
        assert event.toggled().id == event.id
        assert not event.is_completed


class TestEventListHelpers:
    @pytest.fixture
    def events(self):
        return [
            TimelineEvent(title="b", date=date(2026, 3, 1), id="b", category=EventCategory.MILESTONE),
            TimelineEvent(title="a", date=date(2026, 1, 1), id="a"),
            TimelineEvent(title="c", date=date(2026, 2, 1), id="c", is_completed=True),
            TimelineEvent(title="f", date=date(2026, 2, 1), id="f", category=EventCategory.FACT),
        ]

    def test_events_in_category_sorted(self, events):
        assert [e.id for e in events_in_category(events, EventCategory.TODO)] == ["a", "c"]

    def test_upsert_replaces(self, events):
        updated = upsert_event(events, TimelineEvent(title="A!", date=date(2026, 1, 2), id="a"))
        assert len(updated) == 4
        assert updated[1].title == "A!"

    def test_upsert_appends(self, events):
        updated = upsert_event(events, TimelineEvent(title="new", date=date(2026, 1, 2), id="n"))
        assert [e.id for e in updated][-1] == "n"

    def test_remove(self, events):
        assert [e.id for e in remove_event(events, "c")] == ["b", "a", "f"]

    def test_toggle(self, events):
        toggled = toggle_event(events, "a")
        assert toggled[1].is_completed
        assert not events[1].is_completed

    def test_stats(self, events):
        stats = compute_stats(events)
        assert stats.milestones == 1
        assert stats.todos == 2
        assert stats.completed_todos == 1
        assert stats.facts == 1
