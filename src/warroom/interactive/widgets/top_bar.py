"""Top bar widget with status line and command input."""

from __future__ import annotations

from typing import List

from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, Static


class TopBar(Widget):
    """Status line plus a command input with history."""

    DEFAULT_CSS = """
    TopBar {
        height: auto;
        dock: top;
        background: $panel;
    }

    TopBar #title-status {
        width: 100%;
        height: 1;
        content-align: center middle;
        background: $primary;
        color: $text;
    }

    TopBar #command-input {
        height: 1;
        min-height: 1;
        border: none;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(self, status: str = "WAR ROOM", *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.status = status
        self.command_history: List[str] = []
        self.history_index = -1

    def compose(self) -> ComposeResult:
        yield Static(self.status, id="title-status")
        yield Input(placeholder="Enter command (type /help for commands)", id="command-input")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle command submission."""
        if event.input.id != "command-input":
            return

        command = event.value.strip()
        if command:
            self.command_history.append(command)
            self.history_index = len(self.command_history)
            self.post_message(self.CommandSubmitted(command))

        event.input.value = ""

    async def on_key(self, event) -> None:
        """Handle key presses for command history."""
        input_widget = self.query_one("#command-input", Input)
        if not input_widget.has_focus:
            return

        if event.key == "up":
            if self.command_history and self.history_index > 0:
                self.history_index -= 1
                input_widget.value = self.command_history[self.history_index]
                input_widget.cursor_position = len(input_widget.value)
            event.prevent_default()
        elif event.key == "down":
            if self.command_history:
                if self.history_index < len(self.command_history) - 1:
                    self.history_index += 1
                    input_widget.value = self.command_history[self.history_index]
                else:
                    self.history_index = len(self.command_history)
                    input_widget.value = ""
                input_widget.cursor_position = len(input_widget.value)
            event.prevent_default()

    def update_status(self, status: str) -> None:
        """Update the status text."""
        self.status = status
        self.query_one("#title-status", Static).update(status)

    class CommandSubmitted(Message):
        """Message sent when command is submitted."""

        def __init__(self, command: str) -> None:
            super().__init__()
            self.command = command
