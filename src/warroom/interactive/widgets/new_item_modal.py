"""Modal for entering a task or mission title."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static


class NewItemModal(ModalScreen):
    """Modal dialog asking for a title; dismisses with the stripped text or None."""

    DEFAULT_CSS = """
    NewItemModal {
        align: center middle;
    }

    NewItemModal > Vertical {
        width: 60;
        height: auto;
        background: $panel;
        border: thick $primary;
        padding: 1 2;
    }

    NewItemModal Label {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    NewItemModal #title-hint {
        width: 100%;
        color: $text-muted;
    }

    NewItemModal Input {
        width: 100%;
        margin-bottom: 1;
    }

    NewItemModal Grid {
        width: 100%;
        height: auto;
        grid-size: 2;
        grid-gutter: 1;
    }

    NewItemModal Button {
        width: 100%;
    }
    """

    def __init__(self, heading: str, max_length: int = 40, initial: str = "", *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.heading = heading
        self.max_length = max_length
        self.initial = initial[:max_length]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.heading)
            yield Input(value=self.initial, max_length=self.max_length, id="title-input")
            yield Static(f"Up to {self.max_length} characters", id="title-hint")
            with Grid():
                yield Button("Cancel", variant="default", id="cancel-button")
                yield Button("Save", variant="primary", id="save-button")

    def on_mount(self) -> None:
        self.query_one("#title-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel-button":
            self.dismiss(None)
        elif event.button.id == "save-button":
            self._submit()

    def on_key(self, event) -> None:
        if event.key == "escape":
            self.dismiss(None)

    def _submit(self) -> None:
        title_input = self.query_one("#title-input", Input)
        title = title_input.value.strip()
        if title:
            self.dismiss(title)
        else:
            # Don't dismiss if empty
            title_input.focus()
