"""Mission board widget: missions with their tasks, then standalone tasks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, ListItem, ListView

from ...state.models import Mission, Task, short_id
from ...state.visibility import MissionGroup, VisibleGroups


@dataclass
class BoardEntry:
    """One selectable row: a mission header or a task."""

    kind: str  # "mission" or "task"
    id: str
    title: str


class MissionBoard(Widget):
    """Widget displaying the visible grouping for the current mode."""

    DEFAULT_CSS = """
    MissionBoard Vertical {
        height: 100%;
    }

    MissionBoard ListView {
        height: 1fr;
    }
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.border_title = "Missions"
        self.entries: List[BoardEntry] = []

    def compose(self) -> ComposeResult:
        with Vertical():
            yield ListView(id="board-list-view")

    def update_groups(self, groups: VisibleGroups, select_id: Optional[str] = None) -> None:
        list_view = self.query_one("#board-list-view", ListView)
        previous = self.selected_entry()
        keep_id = select_id or (previous.id if previous else None)

        list_view.clear()
        self.entries = []
        self.border_title = f"Missions - {groups.mode.value}"

        for group in groups.missions:
            self._append(list_view, BoardEntry("mission", group.mission.id, group.mission.title), self._mission_text(group))
            for task in group.tasks:
                self._append(list_view, BoardEntry("task", task.id, task.title), self._task_text(task, indent=True))

        if groups.standalone:
            list_view.append(ListItem(Label(Text("Standalone", style="bold dim")), disabled=True))
            self.entries.append(BoardEntry("header", "", "Standalone"))
            for task in groups.standalone:
                self._append(list_view, BoardEntry("task", task.id, task.title), self._task_text(task, indent=True))

        if groups.is_empty():
            list_view.append(ListItem(Label(Text("Nothing to show in this mode", style="dim")), disabled=True))
            self.entries.append(BoardEntry("header", "", ""))

        if keep_id:
            for index, entry in enumerate(self.entries):
                if entry.id == keep_id:
                    self.call_after_refresh(setattr, list_view, "index", index)
                    break

    def selected_entry(self) -> Optional[BoardEntry]:
        list_view = self.query_one("#board-list-view", ListView)
        index = list_view.index
        if index is None or index >= len(self.entries):
            return None
        entry = self.entries[index]
        return entry if entry.kind in ("mission", "task") else None

    def _append(self, list_view: ListView, entry: BoardEntry, text: Text) -> None:
        self.entries.append(entry)
        list_view.append(ListItem(Label(text)))

    @staticmethod
    def _mission_text(group: MissionGroup) -> Text:
        mission: Mission = group.mission
        text = Text()
        if mission.is_manually_completed:
            text.append("◆ ", style="green")
        elif group.eligible:
            text.append("◇ ", style="yellow")
        else:
            text.append("◇ ", style="#888888")
        text.append(mission.title, style="bold")
        text.append(f" [{short_id(mission.id)}]", style="dim")
        if group.eligible and not mission.is_manually_completed:
            text.append("  ready to complete", style="italic yellow")
        return text

    @staticmethod
    def _task_text(task: Task, indent: bool = False) -> Text:
        text = Text("  " if indent else "")
        if task.is_done:
            text.append("● ", style="green")
            text.append(task.title, style="strike dim")
        else:
            text.append("○ ", style="#888888")
            text.append(task.title)
        text.append(f" [{short_id(task.id)}]", style="dim")
        return text

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Enter on a row toggles the task or mission."""
        entry = self.selected_entry()
        if entry:
            self.post_message(self.EntryActivated(entry))
            event.stop()

    class EntryActivated(Message):
        """Message sent when a row is activated."""

        def __init__(self, entry: BoardEntry) -> None:
            super().__init__()
            self.entry = entry
