"""Help modal screen showing keybindings."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option


HELP_ITEMS: list[tuple[str, str, str]] = [
    # (key_display, description, action_name_or_empty)
    # -- Timeline --
    ("+ / -", "Zoom in / out", ""),
    ("← / →", "Scroll the timeline", ""),
    ("t", "Center on due date", "recenter"),
    ("Click", "Add event at date / edit card or cue", ""),
    # -- Events --
    ("a", "Add event", "add_event"),
    ("c", "Add visual cue", "add_cue"),
    ("u", "Change due date", "edit_due_date"),
    ("g", "Generate plan with AI", "generate"),
    ("m", "Milestones list", "show_milestones"),
    ("o", "To-do list", "show_todos"),
    # -- File --
    ("Ctrl+S", "Save now", "save"),
    ("Ctrl+E", "Export plan (JSON)", "export"),
    ("Ctrl+O", "Import plan (JSON)", "import_plan"),
    # -- Common --
    ("Esc", "Cancel / Close modal", ""),
    ("?", "This help", ""),
    ("q", "Quit", "quit_app"),
]


class HelpScreen(ModalScreen[str]):
    """Keybinding list; Enter on an entry dismisses with its action name."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("question_mark", "close", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    #help-container {
        width: 64;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #help-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #help-list {
        height: auto;
        max-height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="help-container"):
            yield Static("[bold]Keybindings[/bold]  (Enter to execute)", id="help-title")
            options = OptionList(id="help-list")
            for key_display, desc, action in HELP_ITEMS:
                options.add_option(Option(f"  {key_display:<12} {desc}", id=action or None))
            yield options

    def on_mount(self) -> None:
        self.query_one("#help-list", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id or "")

    def action_close(self) -> None:
        self.dismiss("")
