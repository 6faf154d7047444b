"""Single-value prompt (due date, export filename, import path)."""

from __future__ import annotations

from typing import Callable, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

# Returns an error message, or None when the value is acceptable.
Validator = Callable[[str], Optional[str]]


class EditScreen(ModalScreen[str | None]):
    """Modal prompting for one line of text.

    With a *validator*, invalid values keep the dialog open and show the
    returned message as an error notification.
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    DEFAULT_CSS = """
    EditScreen {
        align: center middle;
    }
    #edit-container {
        width: 60;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #edit-label {
        margin-bottom: 1;
        text-style: bold;
    }
    #edit-input {
        margin-bottom: 1;
    }
    #edit-buttons {
        align: center middle;
        height: 3;
    }
    #edit-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        label: str,
        initial_value: str = "",
        placeholder: str = "",
        validator: Validator | None = None,
    ) -> None:
        super().__init__()
        self._label = label
        self._initial_value = initial_value
        self._placeholder = placeholder
        self._validator = validator

    def compose(self) -> ComposeResult:
        with Static(id="edit-container"):
            yield Static(self._label, id="edit-label")
            yield Input(
                value=self._initial_value,
                placeholder=self._placeholder,
                id="edit-input",
            )
            with Horizontal(id="edit-buttons"):
                yield Button("OK", variant="primary", id="ok-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#edit-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok-btn":
            self._submit(self.query_one("#edit-input", Input).value)
        else:
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    def _submit(self, value: str) -> None:
        value = value.strip()
        if self._validator is not None:
            error = self._validator(value)
            if error:
                self.notify(error, severity="error")
                return
        self.dismiss(value)

    def action_cancel(self) -> None:
        self.dismiss(None)
