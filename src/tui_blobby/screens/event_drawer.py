"""Side list of one category's events (milestones, to-dos)."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from tui_blobby.models import (
    EventCategory,
    TimelineEvent,
    events_in_category,
    format_date_display,
)


def drawer_summary(events: list[TimelineEvent], category: EventCategory) -> str:
    items = events_in_category(events, category)
    if category == EventCategory.TODO:
        done = sum(1 for e in items if e.is_completed)
        return f"{done}/{len(items)} completed"
    return f"{len(items)} items"


def _option_label(event: TimelineEvent, is_todo: bool) -> Text:
    label = Text()
    if is_todo:
        label.append("● " if event.is_completed else "○ ", style="green" if event.is_completed else "grey50")
    else:
        label.append("★ ", style=event.color)
    title_style = "strike dim" if is_todo and event.is_completed else "bold"
    label.append(event.title, style=title_style)
    label.append(f"  {format_date_display(event.date)}", style="dim")
    if event.description:
        label.append(f"\n    {event.description}", style="dim")
    return label


class EventDrawerScreen(ModalScreen[str | None]):
    """Dismisses with the id of the event to edit, or ``None`` when closed.

    *on_toggle* flips completion of an event and returns the updated list.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("space", "toggle", "Toggle done"),
    ]

    DEFAULT_CSS = """
    EventDrawerScreen {
        align: right top;
    }
    #drawer-container {
        width: 56;
        height: 100%;
        background: $surface;
        border-left: thick $primary;
        padding: 1 1;
    }
    #drawer-title {
        text-style: bold;
    }
    #drawer-summary {
        color: $text-muted;
        margin-bottom: 1;
    }
    #drawer-list {
        height: 1fr;
    }
    """

    def __init__(
        self,
        events: list[TimelineEvent],
        category: EventCategory,
        title: str,
        on_toggle: Callable[[str], list[TimelineEvent]] | None = None,
    ) -> None:
        super().__init__()
        self._events = events
        self._category = category
        self._title = title
        self._on_toggle = on_toggle

    @property
    def is_todo(self) -> bool:
        return self._category == EventCategory.TODO

    def compose(self) -> ComposeResult:
        with Vertical(id="drawer-container"):
            yield Static(self._title, id="drawer-title")
            yield Static(drawer_summary(self._events, self._category), id="drawer-summary")
            yield OptionList(id="drawer-list")

    def on_mount(self) -> None:
        self._populate()
        self.query_one("#drawer-list", OptionList).focus()

    def _populate(self, highlight: int | None = None) -> None:
        option_list = self.query_one("#drawer-list", OptionList)
        option_list.clear_options()
        items = events_in_category(self._events, self._category)
        if not items:
            option_list.add_option(Option(f"No {self._title.lower()} yet.", disabled=True))
        for event in items:
            option_list.add_option(Option(_option_label(event, self.is_todo), id=event.id))
        if items:
            option_list.highlighted = min(highlight or 0, len(items) - 1)
        self.query_one("#drawer-summary", Static).update(drawer_summary(self._events, self._category))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self.dismiss(event.option.id)

    def action_toggle(self) -> None:
        if not self.is_todo or self._on_toggle is None:
            return
        option_list = self.query_one("#drawer-list", OptionList)
        index = option_list.highlighted
        if index is None:
            return
        option = option_list.get_option_at_index(index)
        if option.id is None:
            return
        self._events = self._on_toggle(option.id)
        self._populate(highlight=index)

    def action_close(self) -> None:
        self.dismiss(None)
