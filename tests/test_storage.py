"""Tests for local autosave and JSON import/export."""

import json
from datetime import date, datetime

import pytest

from tui_blobby.models import EventCategory, EventType, IconName, TimelineEvent
from tui_blobby.storage import (
    SnapshotError,
    default_export_name,
    event_from_dict,
    event_to_dict,
    export_to_file,
    import_from_file,
    load_local,
    save_local,
    snapshot_from_dict,
    snapshot_to_dict,
)


DUE = date(2026, 2, 14)


@pytest.fixture
def events():
    return [
        TimelineEvent(title="Pack hospital bag", date=date(2026, 1, 31), id="bag", is_completed=True),
        TimelineEvent(
            title="Baby shower",
            date=date(2026, 1, 10),
            id="shower",
            category=EventCategory.MILESTONE,
            type=EventType.MARKER,
            icon=IconName.GIFT,
        ),
    ]


class TestEventDict:
    def test_camel_case_keys(self, events):
        d = event_to_dict(events[0])
        assert d["isCompleted"] is True
        assert d["date"] == "2026-01-31"
        assert d["type"] == "standard"
        assert d["category"] == "TODO"
        assert "icon" not in d

    def test_marker_icon(self, events):
        d = event_to_dict(events[1])
        assert d["type"] == "marker"
        assert d["icon"] == "gift"

    def test_missing_fields_default(self):
        event = event_from_dict({"title": "Scan", "date": "2026-01-20", "category": "MEDICAL"})
        assert event.type == EventType.STANDARD
        assert event.color == "#8b5cf6"
        assert event.id
        assert not event.is_completed

    def test_unknown_values_tolerated(self):
        event = event_from_dict(
            {"title": "x", "date": "2026-01-20", "category": "PARTY", "type": "blob", "icon": "unicorn"}
        )
        assert event.category == EventCategory.OTHER
        assert event.type == EventType.STANDARD
        assert event.icon is None

    def test_end_date_kept(self):
        event = event_from_dict({"title": "x", "date": "2026-01-20", "endDate": "2026-01-25"})
        assert event.end_date == date(2026, 1, 25)
        assert event_to_dict(event)["endDate"] == "2026-01-25"


class TestSnapshot:
    def test_to_dict(self, events):
        data = snapshot_to_dict(DUE, events, saved_at=datetime(2026, 1, 1, 12, 0, 0))
        assert data["dueDate"] == "2026-02-14"
        assert len(data["events"]) == 2
        assert data["lastSaved"] == "2026-01-01T12:00:00"

    def test_from_dict(self, events):
        snapshot = snapshot_from_dict(snapshot_to_dict(DUE, events))
        assert snapshot.due_date == DUE
        assert snapshot.events == events
        assert snapshot.last_saved is not None

    @pytest.mark.parametrize("data", [[], {}, {"events": []}, {"dueDate": "2026-02-14"}, {"dueDate": "2026-02-14", "events": {}}])
    def test_missing_parts(self, data):
        with pytest.raises(SnapshotError, match="Missing due date or events"):
            snapshot_from_dict(data)

    def test_bad_event_date(self):
        with pytest.raises(SnapshotError):
            snapshot_from_dict({"dueDate": "2026-02-14", "events": [{"title": "x", "date": "soon"}]})

    @pytest.mark.parametrize("item", [1, "bag", None, ["x"]])
    def test_event_not_an_object(self, item):
        with pytest.raises(SnapshotError, match="must be an object"):
            snapshot_from_dict({"dueDate": "2026-02-14", "events": [item]})


class TestLocal:
    def test_round_trip(self, tmp_path, events):
        path = save_local(tmp_path, DUE, events)
        assert path == tmp_path / ".tui-blobby" / "blobby_data.json"
        snapshot = load_local(tmp_path)
        assert snapshot.due_date == DUE
        assert snapshot.events == events

    def test_no_temp_files_left(self, tmp_path, events):
        save_local(tmp_path, DUE, events)
        save_local(tmp_path, DUE, events[:1])
        assert [p.name for p in (tmp_path / ".tui-blobby").iterdir()] == ["blobby_data.json"]

    def test_missing(self, tmp_path):
        assert load_local(tmp_path) is None

    def test_corrupt_returns_none(self, tmp_path):
        data_dir = tmp_path / ".tui-blobby"
        data_dir.mkdir()
        (data_dir / "blobby_data.json").write_text("{not json", encoding="utf-8")
        assert load_local(tmp_path) is None

    def test_not_utf8_returns_none(self, tmp_path):
        data_dir = tmp_path / ".tui-blobby"
        data_dir.mkdir()
        (data_dir / "blobby_data.json").write_bytes(b"\xff\xfe{\"dueDate\": \"2026-02-14\"}")
        assert load_local(tmp_path) is None

    def test_non_object_event_returns_none(self, tmp_path):
        data_dir = tmp_path / ".tui-blobby"
        data_dir.mkdir()
        (data_dir / "blobby_data.json").write_text('{"dueDate": "2026-02-14", "events": [1]}', encoding="utf-8")
        assert load_local(tmp_path) is None


class TestExportImport:
    def test_default_name(self):
        assert default_export_name(date(2026, 3, 9)) == "blobby-plan-2026-03-09.json"

    def test_export_is_pretty(self, tmp_path, events):
        out = export_to_file(tmp_path / "plan.json", DUE, events)
        text = out.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text)["dueDate"] == "2026-02-14"

    def test_import_exported(self, tmp_path, events):
        out = export_to_file(tmp_path / "plan.json", DUE, events)
        snapshot = import_from_file(out)
        assert snapshot.events == events

    def test_import_not_json(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("hello", encoding="utf-8")
        with pytest.raises(SnapshotError, match="valid JSON"):
            import_from_file(path)

    def test_import_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError):
            import_from_file(tmp_path / "nope.json")

    def test_import_not_utf8(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_bytes(b"\xff\xfe{\"dueDate\": \"2026-02-14\"}")
        with pytest.raises(SnapshotError, match="not UTF-8"):
            import_from_file(path)

    def test_import_wrong_shape(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text('{"events": []}', encoding="utf-8")
        with pytest.raises(SnapshotError):
            import_from_file(path)
