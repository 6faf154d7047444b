"""Project configuration (tomlkit) and runtime settings (YAML)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import tomlkit
import yaml

from tui_blobby.layout import (
    CanvasMetrics,
    ConfigurationError,
    LodThresholds,
    OutOfWindowPolicy,
    clamp_zoom,
)
from tui_blobby.models import (
    DATE_FORMAT_PRESETS,
    DEFAULT_DATE_FORMAT,
    ProjectConfig,
    TimeWindow,
    parse_date,
)

logger = logging.getLogger(__name__)

CONFIG_DIR = ".tui-blobby"
CONFIG_FILE = "config.toml"
SETTINGS_FILE = "settings.yaml"


def _get_config_path(project_dir: Path) -> Path:
    return project_dir / CONFIG_DIR / CONFIG_FILE


def load_config(project_dir: Path) -> ProjectConfig:
    """Load project configuration from .tui-blobby/config.toml.

    Missing or unreadable files give the defaults; individual bad values
    fall back to their defaults.
    """
    config_path = _get_config_path(project_dir)
    config = ProjectConfig()

    if not config_path.exists():
        return config

    try:
        doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
    except Exception:
        logger.warning("Ignoring unreadable config %s", config_path, exc_info=True)
        return config

    project_section = doc.get("project", {})
    config.name = str(project_section.get("name", ""))
    raw_fmt = str(project_section.get("date_format", DEFAULT_DATE_FORMAT))
    config.date_format = raw_fmt if raw_fmt in DATE_FORMAT_PRESETS else DEFAULT_DATE_FORMAT

    timeline_section = doc.get("timeline", {})
    try:
        config.zoom = float(timeline_section.get("zoom", config.zoom))
    except (TypeError, ValueError):
        logger.warning("Invalid zoom in %s, using %s", config_path, config.zoom)

    start = timeline_section.get("window_start")
    end = timeline_section.get("window_end")
    if start is not None and end is not None:
        try:
            config.window = TimeWindow(parse_date(str(start)), parse_date(str(end)))
        except ValueError:
            logger.warning("Invalid window in %s, using default", config_path)

    return config


def save_config(project_dir: Path, config: ProjectConfig) -> None:
    """Save project configuration to .tui-blobby/config.toml."""
    config_path = _get_config_path(project_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()

    project_table = tomlkit.table()
    project_table.add("name", config.name)
    project_table.add("date_format", config.date_format)
    doc.add("project", project_table)

    timeline_table = tomlkit.table()
    timeline_table.add("zoom", config.zoom)
    timeline_table.add("window_start", config.window.start.isoformat())
    timeline_table.add("window_end", config.window.end.isoformat())
    doc.add("timeline", timeline_table)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def validate_window(window: TimeWindow) -> TimeWindow:
    """Setup-time check; raises ``ConfigurationError`` for an empty window."""
    if window.start >= window.end:
        raise ConfigurationError(
            f"Time window must end after it starts: {window.start} .. {window.end}"
        )
    return window


# ── Settings (YAML) ─────────────────────────────────────────────

def _load_yaml(path: Path) -> dict:
    """Load a YAML file and return a dict (empty dict on error)."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        logger.warning("Could not load settings from %s", path, exc_info=True)
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (returns a new dict)."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def load_settings(project_dir: Path | None = None) -> dict[str, Any]:
    """Load settings from default_settings.yaml + optional project override.

    1. Load ``default_settings.yaml`` bundled with the package.
    2. If *project_dir* is given and ``{project_dir}/.tui-blobby/settings.yaml``
       exists, deep-merge it on top of the defaults.
    """
    default_path = Path(__file__).parent / "default_settings.yaml"
    data = _load_yaml(default_path)

    if project_dir is not None:
        override_path = project_dir / CONFIG_DIR / SETTINGS_FILE
        if override_path.is_file():
            override = _load_yaml(override_path)
            if override:
                data = _deep_merge(data, override)

    return data


def _number(section: dict, key: str, default: float) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Setting %r is not a number: %r", key, value)
        return default


def get_canvas_metrics(settings: dict[str, Any]) -> CanvasMetrics:
    canvas = settings.get("canvas", {}) or {}
    defaults = CanvasMetrics()
    return CanvasMetrics(
        header_height=_number(canvas, "header_height", defaults.header_height),
        top_padding=_number(canvas, "top_padding", defaults.top_padding),
        row_height=_number(canvas, "row_height", defaults.row_height),
        buffer_margin=_number(canvas, "buffer_margin", defaults.buffer_margin),
    )


def get_cell_size(settings: dict[str, Any]) -> tuple[float, float]:
    """(pixels per terminal column, pixels per terminal line)."""
    canvas = settings.get("canvas", {}) or {}
    cell_px = _number(canvas, "cell_px", 5) or 5
    line_px = _number(canvas, "line_px", 20) or 20
    return cell_px, line_px


def get_lod_thresholds(settings: dict[str, Any]) -> LodThresholds:
    ticks = settings.get("ticks", {}) or {}
    defaults = LodThresholds()
    return LodThresholds(
        day_number=_number(ticks, "day_number", defaults.day_number),
        minor_tick=_number(ticks, "minor_tick", defaults.minor_tick),
        month_year=_number(ticks, "month_year", defaults.month_year),
    )


def get_zoom_settings(settings: dict[str, Any]) -> tuple[float, float, float]:
    """(min_zoom, max_zoom, zoom_step)."""
    timeline = settings.get("timeline", {}) or {}
    return (
        _number(timeline, "zoom_min", 5),
        _number(timeline, "zoom_max", 100),
        _number(timeline, "zoom_step", 5),
    )


def get_card_geometry(settings: dict[str, Any]) -> tuple[float, float]:
    """(card_width, lane_gutter)."""
    timeline = settings.get("timeline", {}) or {}
    return _number(timeline, "card_width", 160), _number(timeline, "lane_gutter", 10)


def get_click_policy(settings: dict[str, Any]) -> OutOfWindowPolicy:
    timeline = settings.get("timeline", {}) or {}
    raw = str(timeline.get("out_of_window_clicks", "accept")).lower()
    try:
        return OutOfWindowPolicy(raw)
    except ValueError:
        logger.warning("Unknown out_of_window_clicks policy %r, accepting", raw)
        return OutOfWindowPolicy.ACCEPT


def get_generation_settings(settings: dict[str, Any]) -> dict[str, Any]:
    generation = settings.get("generation", {}) or {}
    return {
        "model": str(generation.get("model", "gemini-2.5-flash")),
        "endpoint": str(
            generation.get(
                "endpoint", "https://generativelanguage.googleapis.com/v1beta/models"
            )
        ),
        "timeout": _number(generation, "timeout", 60),
    }


def effective_zoom(config: ProjectConfig, settings: dict[str, Any]) -> float:
    """Configured zoom clamped into the configured bounds."""
    min_zoom, max_zoom, _ = get_zoom_settings(settings)
    return clamp_zoom(config.zoom, min_zoom, max_zoom)
