"""Tests for the layout engine and its invalidation events."""

from datetime import date

import pytest

from tui_blobby.layout import (
    ConfigurationError,
    DateScale,
    Invalidation,
    TimelineLayoutEngine,
    build_layout,
)
from tui_blobby.models import DEFAULT_WINDOW, EventType, TimeWindow, TimelineEvent


DUE = date(2026, 2, 14)


@pytest.fixture
def engine():
    return TimelineLayoutEngine(DEFAULT_WINDOW, DUE)


@pytest.fixture
def received(engine):
    calls = []
    engine.subscribe(lambda reason, layout: calls.append((reason, layout)))
    return calls


class TestInvalidation:
    def test_recentering_reasons(self):
        assert Invalidation.ZOOM_CHANGED.recenters
        assert Invalidation.DUE_DATE_CHANGED.recenters
        assert not Invalidation.EVENTS_CHANGED.recenters
        assert not Invalidation.WINDOW_RESIZED.recenters


class TestEngine:
    def test_initial_layout(self, engine):
        layout = engine.layout
        assert layout.due_date == DUE
        assert layout.scale.zoom == 25
        assert layout.standard == []
        assert layout.due_x == 75 * 25

    def test_invalid_window_raises_at_construction(self):
        with pytest.raises(ConfigurationError):
            TimelineLayoutEngine(TimeWindow(date(2026, 1, 1), date(2025, 1, 1)), DUE)

    def test_initial_zoom_clamped(self):
        assert TimelineLayoutEngine(DEFAULT_WINDOW, DUE, zoom=500).zoom == 100

    def test_set_events_notifies(self, engine, received):
        engine.set_events([TimelineEvent(title="Buy crib", date=date(2026, 1, 5))])
        assert len(received) == 1
        reason, layout = received[0]
        assert reason == Invalidation.EVENTS_CHANGED
        assert [p.event.title for p in layout.standard] == ["Buy crib"]
        assert layout is engine.layout

    def test_set_zoom_clamps_and_notifies(self, engine, received):
        engine.set_zoom(150)
        assert engine.zoom == 100
        engine.set_zoom(1)
        assert engine.zoom == 5
        assert [r for r, _ in received] == [Invalidation.ZOOM_CHANGED] * 2

    def test_zoom_steps(self, engine):
        engine.zoom_in()
        assert engine.zoom == 30
        engine.zoom_out()
        engine.zoom_out()
        assert engine.zoom == 20

    def test_zoom_rescales_positions(self, engine):
        engine.set_events([TimelineEvent(title="x", date=date(2026, 1, 1))])
        before = engine.layout.standard[0].x
        engine.set_zoom(50)
        assert engine.layout.standard[0].x == before * 2

    def test_due_date_change(self, engine, received):
        engine.set_due_date(date(2026, 3, 1))
        reason, layout = received[-1]
        assert reason == Invalidation.DUE_DATE_CHANGED
        assert reason.recenters
        assert layout.due_date == date(2026, 3, 1)

    def test_resize_changes_centering(self, engine, received):
        engine.resize(1000)
        assert received[-1][0] == Invalidation.WINDOW_RESIZED
        assert engine.centering_scroll() == engine.layout.due_x - 500

    def test_unsubscribe(self, engine, received):
        calls = []
        unsubscribe = engine.subscribe(lambda reason, layout: calls.append(reason))
        unsubscribe()
        unsubscribe()
        engine.zoom_in()
        assert calls == []
        assert len(received) == 1

    def test_canvas_height_follows_lanes(self, engine):
        base = engine.layout.canvas.height
        engine.set_events([TimelineEvent(title=str(i), date=DUE) for i in range(3)])
        assert engine.layout.max_lane == 2
        assert engine.layout.canvas.height == base + 2 * 60

    def test_markers_separate(self, engine):
        engine.set_events([
            TimelineEvent(title="Shower", date=DUE, type=EventType.MARKER),
            TimelineEvent(title="Bag", date=DUE),
        ])
        assert [p.event.title for p in engine.layout.markers] == ["Shower"]
        assert [p.event.title for p in engine.layout.standard] == ["Bag"]


class TestBuildLayout:
    def test_ticks_cover_window(self):
        scale = DateScale(DEFAULT_WINDOW, 10)
        layout = build_layout([], DUE, scale)
        assert len(layout.ticks) == scale.total_days

    def test_centering_scroll(self):
        layout = build_layout([], DUE, DateScale(DEFAULT_WINDOW, 25))
        assert layout.centering_scroll(600) == 75 * 25 - 300
