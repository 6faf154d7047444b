"""Add/edit form for a timeline event or visual cue."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Select, Static, TextArea

from tui_blobby.models import (
    AVAILABLE_ICONS,
    DEFAULT_COLORS,
    EventCategory,
    EventType,
    IconName,
    TimelineEvent,
    format_date,
    parse_date,
)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class EditResult:
    """What the form was closed with: ``save`` or ``delete``."""

    action: str
    event: TimelineEvent


def event_from_form(
    existing: TimelineEvent | None,
    *,
    title: str,
    description: str,
    date_text: str,
    category: EventCategory,
    color: str,
    is_completed: bool,
    event_type: EventType,
    icon: IconName | None,
) -> TimelineEvent:
    """Build the saved event from raw form values. Raises ``ValueError`` with a user message."""
    title = title.strip()
    if not title:
        raise ValueError("Title cannot be empty")
    try:
        when = parse_date(date_text)
    except ValueError:
        raise ValueError("Invalid date (use YYYY-MM-DD)") from None
    color = color.strip() or DEFAULT_COLORS[category]
    if not _HEX_COLOR.match(color):
        raise ValueError("Color must look like #RRGGBB")
    fields = dict(
        title=title,
        description=description,
        date=when,
        category=category,
        color=color,
        is_completed=is_completed,
        type=event_type,
        icon=icon if event_type == EventType.MARKER else None,
    )
    if existing is None:
        return TimelineEvent(**fields)
    return replace(existing, **fields)


class EventEditScreen(ModalScreen[EditResult | None]):
    """Modal form; dismisses with an :class:`EditResult` or ``None`` on cancel."""

    BINDINGS = [("escape", "cancel", "Cancel")]

    DEFAULT_CSS = """
    EventEditScreen {
        align: center middle;
    }
    #event-edit-container {
        width: 64;
        max-height: 90%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #event-edit-title {
        text-style: bold;
        margin-bottom: 1;
    }
    .field-label {
        margin-top: 1;
        color: $text-muted;
    }
    #field-description {
        height: 5;
    }
    #event-edit-buttons {
        align: center middle;
        height: 3;
        margin-top: 1;
    }
    #event-edit-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        existing: TimelineEvent | None = None,
        initial_date: date | None = None,
        initial_type: EventType = EventType.STANDARD,
    ) -> None:
        super().__init__()
        self._existing = existing
        self._initial_date = initial_date or date.today()
        self._initial_type = initial_type

    def compose(self) -> ComposeResult:
        event = self._existing
        event_type = event.type if event else self._initial_type
        category = event.category if event else EventCategory.TODO
        heading = "Edit Item" if event else "Add New Item"

        with VerticalScroll(id="event-edit-container"):
            yield Static(f"[bold]{heading}[/bold]", id="event-edit-title")

            yield Static("Style", classes="field-label")
            yield Select(
                [("Standard Card", EventType.STANDARD.value), ("Visual Cue", EventType.MARKER.value)],
                value=event_type.value,
                allow_blank=False,
                id="field-type",
            )

            yield Static("Title", classes="field-label")
            yield Input(
                value=event.title if event else "",
                placeholder="e.g., Baby Shower" if event_type == EventType.MARKER else "e.g., Buy Crib",
                id="field-title",
            )

            yield Static("Date", classes="field-label")
            yield Input(
                value=format_date(event.date if event else self._initial_date),
                placeholder="YYYY-MM-DD",
                id="field-date",
            )

            yield Static("Category", classes="field-label")
            yield Select(
                [(c.value, c.value) for c in EventCategory],
                value=category.value,
                allow_blank=False,
                id="field-category",
            )

            yield Static("Color", classes="field-label")
            yield Input(
                value=event.color if event else DEFAULT_COLORS[category],
                placeholder="#RRGGBB",
                id="field-color",
            )

            yield Static("Icon (visual cues)", classes="field-label")
            yield Select(
                [(f"{icon.glyph}  {icon.value}", icon.value) for icon in AVAILABLE_ICONS],
                value=(event.icon or IconName.STAR).value if event else IconName.STAR.value,
                allow_blank=False,
                id="field-icon",
            )

            yield Static("Description", classes="field-label")
            yield TextArea(event.description if event else "", id="field-description")

            yield Checkbox("Completed", value=event.is_completed if event else False, id="field-completed")

            with Horizontal(id="event-edit-buttons"):
                yield Button("Save", variant="primary", id="save-btn")
                if event is not None:
                    yield Button("Delete", variant="error", id="delete-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_mount(self) -> None:
        self.set_timer(0.01, self._focus_first)

    def _focus_first(self) -> None:
        self.query_one("#field-title", Input).focus()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "field-category" and event.value is not Select.BLANK:
            self.query_one("#field-color", Input).value = DEFAULT_COLORS[EventCategory(event.value)]

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self._submit()
        elif event.button.id == "delete-btn" and self._existing is not None:
            self.dismiss(EditResult("delete", self._existing))
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def _submit(self) -> None:
        try:
            saved = event_from_form(
                self._existing,
                title=self.query_one("#field-title", Input).value,
                description=self.query_one("#field-description", TextArea).text,
                date_text=self.query_one("#field-date", Input).value,
                category=EventCategory(self.query_one("#field-category", Select).value),
                color=self.query_one("#field-color", Input).value,
                is_completed=self.query_one("#field-completed", Checkbox).value,
                event_type=EventType(self.query_one("#field-type", Select).value),
                icon=IconName(self.query_one("#field-icon", Select).value),
            )
        except ValueError as e:
            self.notify(str(e), severity="error")
            return
        self.dismiss(EditResult("save", saved))

    def action_cancel(self) -> None:
        self.dismiss(None)
