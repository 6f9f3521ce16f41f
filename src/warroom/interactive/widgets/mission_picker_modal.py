"""Modal for choosing the mission a task belongs to."""

from __future__ import annotations

from typing import List, Optional

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, ListItem, ListView, Static

from ...state.models import Mission

NO_MISSION = ""


class MissionPickerModal(ModalScreen):
    """Dismisses with a mission id, ``NO_MISSION`` to detach, or None to cancel."""

    DEFAULT_CSS = """
    MissionPickerModal {
        align: center middle;
    }

    MissionPickerModal > Vertical {
        width: 60;
        height: auto;
        max-height: 25;
        background: $panel;
        border: thick $primary;
        padding: 1 2;
    }

    MissionPickerModal Label {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    MissionPickerModal Static {
        width: 100%;
        color: $text-muted;
        margin-bottom: 1;
    }

    MissionPickerModal ListView {
        width: 100%;
        height: 10;
        border: round $primary;
        margin-bottom: 1;
    }

    MissionPickerModal Button {
        width: 100%;
    }
    """

    def __init__(self, task_title: str, missions: List[Mission], current_id: Optional[str], *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.task_title = task_title
        self.missions = missions
        self.current_id = current_id
        self.choices: List[str] = [NO_MISSION] + [mission.id for mission in missions]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label("Assign to Mission")
            yield Static(f"Task: {self.task_title}")
            yield ListView(id="mission-list")
            yield Button("Cancel", variant="default", id="cancel-button")

    def on_mount(self) -> None:
        list_view = self.query_one("#mission-list", ListView)
        marker = "● " if self.current_id is None else "  "
        list_view.append(ListItem(Label(f"{marker}No mission (standalone)")))
        for mission in self.missions:
            marker = "● " if mission.id == self.current_id else "  "
            list_view.append(ListItem(Label(f"{marker}{mission.title}")))
        list_view.focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        if index is not None and index < len(self.choices):
            self.dismiss(self.choices[index])

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel-button":
            self.dismiss(None)

    def on_key(self, event) -> None:
        if event.key == "escape":
            self.dismiss(None)
