"""Modal asking how to delete a mission."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

DETACH = "detach"
CASCADE = "cascade"


class MissionDeleteModal(ModalScreen):
    """Dismisses with ``"detach"``, ``"cascade"`` or None."""

    DEFAULT_CSS = """
    MissionDeleteModal {
        align: center middle;
    }

    MissionDeleteModal > Vertical {
        width: 64;
        height: auto;
        background: $panel;
        border: thick $error;
        padding: 1 2;
    }

    MissionDeleteModal Label {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        margin-bottom: 1;
    }

    MissionDeleteModal Static {
        width: 100%;
        color: $text-muted;
        margin-bottom: 1;
    }

    MissionDeleteModal Grid {
        width: 100%;
        height: auto;
        grid-size: 3;
        grid-gutter: 1;
    }

    MissionDeleteModal Button {
        width: 100%;
    }
    """

    def __init__(self, mission_title: str, task_count: int, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.mission_title = mission_title
        self.task_count = task_count

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"Delete mission {self.mission_title}?")
            yield Static(f"It has {self.task_count} task(s).")
            with Grid():
                yield Button("Cancel", variant="default", id="cancel-button")
                yield Button("Keep tasks", variant="warning", id="detach-button")
                yield Button("Delete tasks too", variant="error", id="cascade-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "detach-button":
            self.dismiss(DETACH)
        elif event.button.id == "cascade-button":
            self.dismiss(CASCADE)
        else:
            self.dismiss(None)

    def on_key(self, event) -> None:
        if event.key == "escape":
            self.dismiss(None)
