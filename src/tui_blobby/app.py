"""Main Textual App for TUI Blobby."""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Static

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
    validate_window,
)
from tui_blobby.generation import GenerationError, generate_timeline_content
from tui_blobby.layout import ConfigurationError, Invalidation, TimelineLayout, TimelineLayoutEngine
from tui_blobby.models import (
    CATEGORY_LABELS,
    DEFAULT_DUE_DATE,
    EventCategory,
    EventType,
    ProjectConfig,
    TimelineEvent,
    compute_stats,
    format_date,
    format_date_display,
    parse_date,
    remove_event,
    toggle_event,
    upsert_event,
)
from tui_blobby.screens.confirm_screen import ConfirmScreen
from tui_blobby.screens.edit_screen import EditScreen
from tui_blobby.screens.event_drawer import EventDrawerScreen
from tui_blobby.screens.event_edit_screen import EditResult, EventEditScreen
from tui_blobby.screens.help_screen import HelpScreen
from tui_blobby.storage import (
    SnapshotError,
    default_export_name,
    export_to_file,
    import_from_file,
    load_local,
    save_local,
)
from tui_blobby.widgets.timeline_canvas import TimelineCanvas, TimelineToolbar

logger = logging.getLogger(__name__)

_AUTOSAVE_DELAY = 1.0  # seconds


def _validate_date_text(value: str) -> str | None:
    try:
        parse_date(value)
    except ValueError:
        return "Invalid date (use YYYY-MM-DD)"
    return None


class BlobbyApp(App):
    """TUI Blobby Application."""

    TITLE = "BLOBBY"
    CSS = """
    #timeline {
        height: 1fr;
        border: round $surface-lighten-2;
    }
    #timeline:focus {
        border: round $accent;
    }
    #status-bar {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $primary-background;
        color: $text;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("question_mark", "help", "Help"),
        Binding("q", "quit_app", "Quit"),
        Binding("plus", "zoom_in", "Zoom +"),
        Binding("equals_sign", "zoom_in", show=False),
        Binding("minus", "zoom_out", "Zoom -"),
        Binding("t", "recenter", "Due date"),
        Binding("a", "add_event", "Add"),
        Binding("c", "add_cue", "Add cue", show=False),
        Binding("u", "edit_due_date", "Due date", show=False),
        Binding("g", "generate", "AI plan"),
        Binding("m", "show_milestones", "Milestones", show=False),
        Binding("o", "show_todos", "To-dos", show=False),
        Binding("ctrl+e", "export", "Export", show=False, priority=True),
        Binding("ctrl+o", "import_plan", "Import", show=False, priority=True),
    ]

    def __init__(self, project_dir: Path, no_color: bool = False) -> None:
        if no_color:
            os.environ["NO_COLOR"] = "1"
        super().__init__()
        self.project_dir = project_dir
        self.no_color = no_color
        self.config: ProjectConfig = ProjectConfig()
        self.engine: TimelineLayoutEngine | None = None
        self.events: list[TimelineEvent] = []
        self._settings: dict = {}
        self._modified: bool = False
        self._autosave_timer: object | None = None
        self._generating: bool = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield TimelineToolbar(id="timeline-toolbar")
        yield TimelineCanvas(id="timeline")
        yield Static("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.set_timer(0.01, self._load_project)

    # ── Loading ──

    def _load_project(self) -> None:
        self.config = load_config(self.project_dir)
        self._settings = load_settings(self.project_dir)
        try:
            window = validate_window(self.config.window)
            min_zoom, max_zoom, zoom_step = get_zoom_settings(self._settings)
            card_width, gutter = get_card_geometry(self._settings)
            snapshot = load_local(self.project_dir)
            self.engine = TimelineLayoutEngine(
                window,
                snapshot.due_date if snapshot else DEFAULT_DUE_DATE,
                zoom=effective_zoom(self.config, self._settings),
                metrics=get_canvas_metrics(self._settings),
                thresholds=get_lod_thresholds(self._settings),
                card_width=card_width,
                gutter=gutter,
                min_zoom=min_zoom,
                max_zoom=max_zoom,
                zoom_step=zoom_step,
            )
        except ConfigurationError as e:
            logger.error("Invalid timeline configuration: %s", e)
            self.exit(return_code=1, message=f"Invalid timeline configuration: {e}")
            return

        canvas = self.query_one("#timeline", TimelineCanvas)
        canvas.cell_px, canvas.line_px = get_cell_size(self._settings)
        canvas.click_policy = get_click_policy(self._settings)
        canvas.date_format = self.config.date_format

        self.events = list(snapshot.events) if snapshot else []
        self.engine.subscribe(self._on_layout_changed)
        self.engine.resize(canvas.size.width * canvas.cell_px)
        self.engine.set_events(self.events)
        canvas.update_layout(self.engine.layout, recenter=True)
        canvas.focus()

        project_name = self.config.name or self.project_dir.name
        self.title = f"BLOBBY - {project_name}"
        logger.info("Loaded %d events from %s", len(self.events), self.project_dir)

    def _on_layout_changed(self, reason: Invalidation, layout: TimelineLayout) -> None:
        self.query_one("#timeline", TimelineCanvas).update_layout(layout, recenter=reason.recenters)
        self.query_one("#timeline-toolbar", TimelineToolbar).update_toolbar(layout.due_date, layout.scale.zoom)
        self._update_status_bar()

    def on_resize(self, event) -> None:
        if self.engine is None:
            return
        canvas = self.query_one("#timeline", TimelineCanvas)
        self.engine.resize(canvas.size.width * canvas.cell_px)

    def _update_status_bar(self) -> None:
        bar = self.query_one("#status-bar", Static)
        stats = compute_stats(self.events)
        parts = [
            f"★ {stats.milestones} milestones",
            f"✔ {stats.completed_todos}/{stats.todos} to-dos",
            f"ⓘ {stats.facts} facts",
        ]
        if self.engine is not None:
            parts.append(f"Due {format_date_display(self.engine.due_date)}")
        if self._generating:
            parts.append("[bold]Generating…[/bold]")
        if self._modified:
            parts.append("unsaved")
        bar.update(" | ".join(parts))

    # ── State changes ──

    def _set_events(self, events: list[TimelineEvent]) -> None:
        self.events = events
        if self.engine is not None:
            self.engine.set_events(events)
        self._mark_modified()

    def _mark_modified(self) -> None:
        self._modified = True
        self._update_status_bar()
        self._schedule_autosave()

    # ── Autosave ──

    def _schedule_autosave(self) -> None:
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
        self._autosave_timer = self.set_timer(_AUTOSAVE_DELAY, self._do_autosave)

    def _do_autosave(self) -> None:
        self._autosave_timer = None
        if self._modified:
            self._write_local()

    def _write_local(self) -> bool:
        if self.engine is None:
            return False
        try:
            save_local(self.project_dir, self.engine.due_date, self.events)
        except OSError as e:
            logger.exception("Autosave failed")
            self.notify(f"Save failed: {e}", severity="error")
            return False
        self._modified = False
        self._update_status_bar()
        return True

    # ── Widget messages ──

    def on_timeline_toolbar_zoom_requested(self, event: TimelineToolbar.ZoomRequested) -> None:
        if event.direction > 0:
            self.action_zoom_in()
        else:
            self.action_zoom_out()

    def on_timeline_toolbar_recenter_requested(self, event: TimelineToolbar.RecenterRequested) -> None:
        self.action_recenter()

    def on_timeline_canvas_event_selected(self, event: TimelineCanvas.EventSelected) -> None:
        self._open_event(event.event_id)

    def on_timeline_canvas_add_event_requested(self, event: TimelineCanvas.AddEventRequested) -> None:
        self.push_screen(EventEditScreen(initial_date=event.date), callback=self._on_event_edited)

    # ── Actions ──

    def action_zoom_in(self) -> None:
        if self.engine is not None:
            self.engine.zoom_in()

    def action_zoom_out(self) -> None:
        if self.engine is not None:
            self.engine.zoom_out()

    def action_recenter(self) -> None:
        if self.engine is not None:
            self.query_one("#timeline", TimelineCanvas).center_on(self.engine.due_date)

    def action_add_event(self) -> None:
        if self.engine is not None:
            self.push_screen(
                EventEditScreen(initial_date=self.engine.due_date),
                callback=self._on_event_edited,
            )

    def action_add_cue(self) -> None:
        if self.engine is not None:
            self.push_screen(
                EventEditScreen(initial_date=self.engine.due_date, initial_type=EventType.MARKER),
                callback=self._on_event_edited,
            )

    def _open_event(self, event_id: str) -> None:
        existing = next((e for e in self.events if e.id == event_id), None)
        if existing is None:
            return
        self.push_screen(EventEditScreen(existing=existing), callback=self._on_event_edited)

    def _on_event_edited(self, result: EditResult | None) -> None:
        if result is None:
            return
        if result.action == "delete":
            self._set_events(remove_event(self.events, result.event.id))
            self.notify(f"Deleted '{result.event.title}'")
        else:
            self._set_events(upsert_event(self.events, result.event))

    def action_edit_due_date(self) -> None:
        if self.engine is None:
            return
        self.push_screen(
            EditScreen(
                "Due date",
                format_date(self.engine.due_date),
                placeholder="YYYY-MM-DD",
                validator=_validate_date_text,
            ),
            callback=self._on_due_date_entered,
        )

    def _on_due_date_entered(self, value: str | None) -> None:
        if not value or self.engine is None:
            return
        due_date = parse_date(value)
        if due_date == self.engine.due_date:
            return
        self.engine.set_due_date(due_date)
        self._mark_modified()

    def action_show_milestones(self) -> None:
        self._show_drawer(EventCategory.MILESTONE)

    def action_show_todos(self) -> None:
        self._show_drawer(EventCategory.TODO)

    def _show_drawer(self, category: EventCategory) -> None:
        self.push_screen(
            EventDrawerScreen(
                self.events,
                category,
                CATEGORY_LABELS[category],
                on_toggle=self._toggle_event,
            ),
            callback=self._on_drawer_closed,
        )

    def _toggle_event(self, event_id: str) -> list[TimelineEvent]:
        self._set_events(toggle_event(self.events, event_id))
        return self.events

    def _on_drawer_closed(self, event_id: str | None) -> None:
        if event_id:
            self._open_event(event_id)

    # Generation
    def action_generate(self) -> None:
        if self.engine is None or self._generating:
            return
        self._generating = True
        self._update_status_bar()
        self.notify("Generating plan…")
        self._generate_worker(self.engine.due_date)

    @work(thread=True, exclusive=True)
    def _generate_worker(self, due_date: date) -> None:
        settings = get_generation_settings(self._settings)
        try:
            generated = generate_timeline_content(
                due_date,
                model=settings["model"],
                endpoint=settings["endpoint"],
                timeout=settings["timeout"],
            )
        except GenerationError:
            logger.exception("Plan generation failed")
            self.call_from_thread(self._on_generation_failed)
            return
        self.call_from_thread(self._on_generated, generated)

    def _on_generated(self, generated: list[TimelineEvent]) -> None:
        self._generating = False
        self._set_events([*self.events, *generated])
        self.notify(f"Added {len(generated)} events")

    def _on_generation_failed(self) -> None:
        self._generating = False
        self._update_status_bar()
        self.notify("Failed to generate content. Please check your API key.", severity="error")

    # Export / import
    def action_export(self) -> None:
        self.push_screen(
            EditScreen("Export filename", default_export_name()),
            callback=self._on_export_filename,
        )

    def _on_export_filename(self, filename: str | None) -> None:
        if not filename or self.engine is None:
            return
        output_path = self.project_dir / filename
        try:
            export_to_file(output_path, self.engine.due_date, self.events)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported to {filename}", severity="information")

    def action_import_plan(self) -> None:
        self.push_screen(
            EditScreen("Import plan from file", placeholder="blobby-plan-YYYY-MM-DD.json"),
            callback=self._on_import_filename,
        )

    def _on_import_filename(self, filename: str | None) -> None:
        if not filename:
            return
        path = Path(filename).expanduser()
        if not path.is_absolute():
            path = self.project_dir / path
        try:
            snapshot = import_from_file(path)
        except SnapshotError as e:
            logger.warning("Import of %s failed: %s", path, e)
            self.notify(
                "Failed to load file. Please ensure it is a valid BLOBBY JSON file.",
                severity="error",
            )
            return

        def _apply(confirmed: bool) -> None:
            if not confirmed or self.engine is None:
                return
            self.engine.set_due_date(snapshot.due_date)
            self._set_events(list(snapshot.events))
            self.notify(f"Loaded {len(snapshot.events)} events")

        self.push_screen(
            ConfirmScreen(
                "Load plan from file? This will replace your current timeline "
                f"with {len(snapshot.events)} events.",
                title="Import plan",
                confirm_label="Replace",
            ),
            callback=_apply,
        )

    def action_save(self) -> None:
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
            self._autosave_timer = None
        if self._write_local():
            self.notify("Saved", severity="information")

    def action_help(self) -> None:
        self.push_screen(HelpScreen(), callback=self._on_help_action)

    def _on_help_action(self, action: str) -> None:
        if action:
            self.run_action(action)

    def action_quit_app(self) -> None:
        if self._autosave_timer is not None:
            self._autosave_timer.stop()
            self._autosave_timer = None
        if self._modified and not self._write_local():
            self.push_screen(
                ConfirmScreen("Could not save your plan. Quit anyway?", confirm_label="Quit"),
                callback=self._on_quit_confirmed,
            )
            return
        self.exit()

    def _on_quit_confirmed(self, confirmed: bool) -> None:
        if confirmed:
            self.exit()
