"""Tests for project configuration and runtime settings."""

from datetime import date

import pytest

from tui_blobby.config import (
    effective_zoom,
    get_canvas_metrics,
    get_card_geometry,
    get_cell_size,
    get_click_policy,
    get_generation_settings,
    get_lod_thresholds,
    get_zoom_settings,
    load_config,
    load_settings,
    save_config,
    validate_window,
)
from tui_blobby.layout import CanvasMetrics, ConfigurationError, LodThresholds, OutOfWindowPolicy
from tui_blobby.models import DEFAULT_WINDOW, ProjectConfig, TimeWindow


def _write(tmp_path, name, text):
    config_dir = tmp_path / ".tui-blobby"
    config_dir.mkdir(exist_ok=True)
    (config_dir / name).write_text(text, encoding="utf-8")


class TestLoadConfig:
    def test_load_nonexistent(self, tmp_path):
        config = load_config(tmp_path)
        assert config.zoom == 25
        assert config.window == DEFAULT_WINDOW
        assert config.date_format == "DD/MM/YYYY"

    def test_load_existing(self, tmp_path):
        _write(
            tmp_path,
            "config.toml",
            """
[project]
name = "Baby plan"
date_format = "YYYY-MM-DD"

[timeline]
zoom = 40
window_start = "2026-01-01"
window_end = "2027-06-30"
""",
        )
        config = load_config(tmp_path)
        assert config.name == "Baby plan"
        assert config.date_format == "YYYY-MM-DD"
        assert config.zoom == 40
        assert config.window == TimeWindow(date(2026, 1, 1), date(2027, 6, 30))

    def test_unknown_date_format_falls_back(self, tmp_path):
        _write(tmp_path, "config.toml", '[project]\ndate_format = "weird"\n')
        assert load_config(tmp_path).date_format == "DD/MM/YYYY"

    def test_bad_window_falls_back(self, tmp_path):
        _write(tmp_path, "config.toml", '[timeline]\nwindow_start = "soon"\nwindow_end = "later"\n')
        assert load_config(tmp_path).window == DEFAULT_WINDOW

    def test_bad_zoom_keeps_default(self, tmp_path):
        _write(tmp_path, "config.toml", '[timeline]\nzoom = "wide"\n')
        assert load_config(tmp_path).zoom == 25

    def test_unparseable_file(self, tmp_path):
        _write(tmp_path, "config.toml", "[[[ not toml")
        assert load_config(tmp_path) == ProjectConfig()

    def test_round_trip(self, tmp_path):
        config = ProjectConfig(
            name="Plan",
            date_format="MM/DD/YYYY",
            zoom=60,
            window=TimeWindow(date(2026, 1, 1), date(2026, 12, 31)),
        )
        save_config(tmp_path, config)
        assert (tmp_path / ".tui-blobby" / "config.toml").exists()
        assert load_config(tmp_path) == config


class TestValidateWindow:
    def test_valid(self):
        assert validate_window(DEFAULT_WINDOW) is DEFAULT_WINDOW

    def test_reversed(self):
        with pytest.raises(ConfigurationError):
            validate_window(TimeWindow(date(2027, 1, 1), date(2026, 1, 1)))


class TestSettings:
    def test_defaults(self):
        settings = load_settings()
        assert get_zoom_settings(settings) == (5, 100, 5)
        assert get_card_geometry(settings) == (160, 10)
        assert get_cell_size(settings) == (5, 20)
        assert get_lod_thresholds(settings) == LodThresholds()
        assert get_click_policy(settings) == OutOfWindowPolicy.ACCEPT
        assert get_generation_settings(settings)["model"] == "gemini-2.5-flash"

    def test_terminal_canvas_metrics(self):
        metrics = get_canvas_metrics(load_settings())
        assert metrics == CanvasMetrics(header_height=60, top_padding=40, row_height=60, buffer_margin=40)

    def test_project_override_deep_merges(self, tmp_path):
        _write(
            tmp_path,
            "settings.yaml",
            "timeline:\n  zoom_max: 60\n  out_of_window_clicks: clamp\nticks:\n  day_number: 30\n",
        )
        settings = load_settings(tmp_path)
        assert get_zoom_settings(settings) == (5, 60, 5)
        assert get_click_policy(settings) == OutOfWindowPolicy.CLAMP
        assert get_lod_thresholds(settings).day_number == 30
        assert get_lod_thresholds(settings).minor_tick == 8

    def test_bad_values_fall_back(self):
        settings = {"timeline": {"zoom_min": "tiny", "out_of_window_clicks": "explode"}}
        assert get_zoom_settings(settings)[0] == 5
        assert get_click_policy(settings) == OutOfWindowPolicy.ACCEPT

    def test_invalid_yaml_ignored(self, tmp_path):
        _write(tmp_path, "settings.yaml", "timeline: [unclosed\n")
        assert get_zoom_settings(load_settings(tmp_path)) == (5, 100, 5)

    def test_effective_zoom_clamped(self):
        settings = load_settings()
        assert effective_zoom(ProjectConfig(zoom=150), settings) == 100
        assert effective_zoom(ProjectConfig(zoom=1), settings) == 5
