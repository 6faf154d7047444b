"""Snapshot persistence: local autosave file and JSON import/export."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any

from tui_blobby.models import (
    DEFAULT_COLORS,
    EventCategory,
    EventType,
    IconName,
    Snapshot,
    TimelineEvent,
    format_date,
    parse_date,
)

logger = logging.getLogger(__name__)

DATA_DIR = ".tui-blobby"
DATA_FILE = "blobby_data.json"


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or is not a valid plan."""


def _data_path(project_dir: Path) -> Path:
    return project_dir / DATA_DIR / DATA_FILE


def event_to_dict(event: TimelineEvent) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "date": format_date(event.date),
        "category": event.category.value,
        "color": event.color,
        "isCompleted": event.is_completed,
        "type": event.type.value,
    }
    if event.icon is not None:
        d["icon"] = event.icon.value
    if event.end_date is not None:
        d["endDate"] = format_date(event.end_date)
    return d


def event_from_dict(data: dict[str, Any]) -> TimelineEvent:
    """Build an event from snapshot JSON. Raises ``ValueError`` on a bad date."""
    try:
        category = EventCategory(str(data.get("category", "OTHER")))
    except ValueError:
        category = EventCategory.OTHER
    try:
        event_type = EventType(str(data.get("type") or "standard"))
    except ValueError:
        event_type = EventType.STANDARD
    icon = None
    if data.get("icon"):
        try:
            icon = IconName(str(data["icon"]))
        except ValueError:
            icon = None
    end_date = parse_date(data["endDate"]) if data.get("endDate") else None
    return TimelineEvent(
        id=str(data.get("id") or uuid.uuid4()),
        title=str(data.get("title", "")),
        description=str(data.get("description", "")),
        date=parse_date(data["date"]),
        category=category,
        color=str(data.get("color") or DEFAULT_COLORS[category]),
        is_completed=bool(data.get("isCompleted", False)),
        type=event_type,
        icon=icon,
        end_date=end_date,
    )


def snapshot_to_dict(due_date: date, events: list[TimelineEvent], saved_at: datetime | None = None) -> dict[str, Any]:
    return {
        "dueDate": format_date(due_date),
        "events": [event_to_dict(e) for e in events],
        "lastSaved": (saved_at or datetime.now()).isoformat(timespec="seconds"),
    }


def snapshot_from_dict(data: Any) -> Snapshot:
    """Validate and convert parsed JSON. Raises ``SnapshotError``."""
    if not isinstance(data, dict) or not data.get("dueDate") or not isinstance(data.get("events"), list):
        raise SnapshotError("Invalid file format: Missing due date or events")
    if not all(isinstance(item, dict) for item in data["events"]):
        raise SnapshotError("Invalid event data: every event must be an object")
    try:
        due_date = parse_date(data["dueDate"])
        events = [event_from_dict(item) for item in data["events"]]
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid event data: {e}") from e
    last_saved = None
    if data.get("lastSaved"):
        try:
            last_saved = datetime.fromisoformat(str(data["lastSaved"]).replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Ignoring unparseable lastSaved %r", data["lastSaved"])
    return Snapshot(due_date=due_date, events=events, last_saved=last_saved)


def _atomic_write(target: Path, content: str) -> None:
    """Write to a temp file in the same directory, then rename over *target*."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix=".tmp", prefix=".tui-blobby-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def save_local(project_dir: Path, due_date: date, events: list[TimelineEvent]) -> Path:
    """Autosave the current state to .tui-blobby/blobby_data.json."""
    path = _data_path(project_dir)
    data = snapshot_to_dict(due_date, events)
    _atomic_write(path, json.dumps(data, ensure_ascii=False))
    logger.debug("Saved %d events to %s", len(events), path)
    return path


def load_local(project_dir: Path) -> Snapshot | None:
    """Load the autosaved state. Missing or corrupt data gives ``None``."""
    path = _data_path(project_dir)
    if not path.exists():
        return None
    try:
        return snapshot_from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, SnapshotError):
        logger.error("Failed to parse local data %s", path, exc_info=True)
        return None


def default_export_name(today: date | None = None) -> str:
    return f"blobby-plan-{format_date(today or date.today())}.json"


def export_to_file(output_path: Path, due_date: date, events: list[TimelineEvent]) -> Path:
    """Write a pretty-printed snapshot for sharing or backup."""
    data = snapshot_to_dict(due_date, events)
    output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path


def import_from_file(path: Path) -> Snapshot:
    """Read an exported snapshot. Raises ``SnapshotError`` on any problem."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError("Failed to read file") from e
    except UnicodeDecodeError as e:
        raise SnapshotError("Failed to read file: not UTF-8 text") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError("Failed to parse file. Is it a valid JSON?") from e
    return snapshot_from_dict(data)
