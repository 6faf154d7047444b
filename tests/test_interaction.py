"""Tests for click position -> date resolution."""

from datetime import date

from tui_blobby.layout import DateScale, OutOfWindowPolicy, pixel_to_date, resolve_click_date
from tui_blobby.models import DEFAULT_WINDOW


SCALE = DateScale(DEFAULT_WINDOW, 25)


class TestPixelToDate:
    def test_local_x_1000(self):
        assert pixel_to_date(1000, 0, 0, SCALE) == date(2026, 1, 10)

    def test_container_offset_and_scroll(self):
        # client 300 - left 100 + scroll 800 == local 1000
        assert pixel_to_date(300, 100, 800, SCALE) == date(2026, 1, 10)

    def test_round_trip_with_scale(self):
        due = date(2026, 2, 14)
        assert pixel_to_date(SCALE.to_pixel(due), 0, 0, SCALE) == due

    def test_before_window_passes_through(self):
        assert pixel_to_date(-250, 0, 0, SCALE) == date(2025, 11, 21)


class TestPolicies:
    def test_accept_is_default(self):
        assert resolve_click_date(-250, 0, 0, SCALE) == date(2025, 11, 21)

    def test_clamp(self):
        clicked = resolve_click_date(-250, 0, 0, SCALE, OutOfWindowPolicy.CLAMP)
        assert clicked == DEFAULT_WINDOW.start

    def test_clamp_after_end(self):
        x = SCALE.total_width + 100
        assert resolve_click_date(x, 0, 0, SCALE, OutOfWindowPolicy.CLAMP) == DEFAULT_WINDOW.end

    def test_reject(self):
        assert resolve_click_date(-250, 0, 0, SCALE, OutOfWindowPolicy.REJECT) is None

    def test_in_window_unaffected_by_policy(self):
        for policy in OutOfWindowPolicy:
            assert resolve_click_date(1000, 0, 0, SCALE, policy) == date(2026, 1, 10)
