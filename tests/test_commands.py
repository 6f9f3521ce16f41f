import asyncio
from pathlib import Path

import pytest

from warroom.bridge import HostBridge
from warroom.interactive.commands import CommandHandler
from warroom.state.manager import StateManager
from warroom.state.persistence import DocumentStore
from warroom.state.visibility import VisibilityMode


class FakeOutput:
    def __init__(self) -> None:
        self.lines = []

    def write_line(self, text, style=None):
        self.lines.append(("line", text))

    def write_section(self, title, content):
        self.lines.append(("section", title))

    def write_error(self, error):
        self.lines.append(("error", error))

    def write_success(self, message):
        self.lines.append(("success", message))

    def write_warning(self, message):
        self.lines.append(("warning", message))

    def last(self):
        return self.lines[-1]


class FakeApp:
    """Stand-in for the Textual app with the hooks the handler uses."""

    def __init__(self) -> None:
        self.output_panel = FakeOutput()
        self.title_max_length = 40
        self.mode = VisibilityMode.OVERVIEW
        self.refreshes = []
        self.undo_timer_started = 0
        self.undo_timer_stopped = 0
        self.exited = False

    def refresh_board(self, select_id=None):
        self.refreshes.append(select_id)

    def set_mode(self, mode):
        self.mode = mode

    def start_undo_timer(self):
        self.undo_timer_started += 1

    def stop_undo_timer(self):
        self.undo_timer_stopped += 1

    def exit(self):
        self.exited = True


@pytest.fixture
def handler(tmp_path: Path):
    store = DocumentStore(tmp_path / "data.json")
    manager = StateManager(store)
    return CommandHandler(manager, HostBridge(store), FakeApp())


def run(handler: CommandHandler, command: str) -> None:
    asyncio.run(handler.handle(command))


def test_free_text_adds_task(handler: CommandHandler) -> None:
    run(handler, "Buy milk")

    assert [t.title for t in handler.manager.tasks] == ["Buy milk"]
    assert handler.app.output_panel.last()[0] == "success"
    assert handler.app.refreshes == [handler.manager.tasks[0].id]


def test_title_cap_enforced(handler: CommandHandler) -> None:
    run(handler, "/task " + "x" * 41)

    assert handler.manager.tasks == []
    assert handler.app.output_panel.last() == ("error", "Title must be at most 40 characters")


def test_mission_flow_with_prefix_ids(handler: CommandHandler) -> None:
    run(handler, "/mission Alpha")
    run(handler, "/task T1")
    mission = handler.manager.missions[0]
    task = handler.manager.tasks[0]

    run(handler, f"/assign {task.id[:6]} {mission.id[:6]}")
    assert task.mission_id == mission.id

    run(handler, f"/complete {mission.id[:6]}")
    assert handler.app.output_panel.last()[0] == "warning"
    assert mission.is_manually_completed is False

    run(handler, f"/toggle {task.id[:6]}")
    run(handler, f"/complete {mission.id[:6]}")
    assert mission.is_manually_completed is True

    run(handler, f"/toggle {task.id[:6]}")
    assert mission.is_manually_completed is False

    run(handler, f"/assign {task.id[:6]} none")
    assert task.mission_id is None


def test_delete_and_undo(handler: CommandHandler) -> None:
    run(handler, "/task Doomed")
    task = handler.manager.tasks[0]

    run(handler, f"/delete {task.id}")
    assert handler.manager.tasks == []
    assert handler.app.undo_timer_started == 1

    run(handler, "/undo")
    assert [t.id for t in handler.manager.tasks] == [task.id]
    assert handler.app.undo_timer_stopped == 1

    run(handler, "/undo")
    assert handler.app.output_panel.last() == ("warning", "Nothing to undo")


def test_delete_mission_cascade_flag(handler: CommandHandler) -> None:
    run(handler, "/mission Alpha")
    mission = handler.manager.missions[0]
    handler.manager.add_task("Owned", mission_id=mission.id)

    run(handler, f"/delete-mission {mission.id} --cascade")

    assert handler.manager.missions == []
    assert handler.manager.tasks == []


def test_delete_mission_detach_by_default(handler: CommandHandler) -> None:
    run(handler, "/mission Alpha")
    mission = handler.manager.missions[0]
    task = handler.manager.add_task("Owned", mission_id=mission.id)

    run(handler, f"/delete-mission {mission.id}")

    assert handler.manager.missions == []
    assert task.mission_id is None


def test_mode_switching(handler: CommandHandler) -> None:
    run(handler, "/mode focus")
    assert handler.app.mode is VisibilityMode.FOCUS

    run(handler, "/mode")
    assert handler.app.mode is VisibilityMode.ACCOMPLISHMENT

    run(handler, "/mode everything")
    assert handler.app.mode is VisibilityMode.ACCOMPLISHMENT
    assert handler.app.output_panel.last()[0] == "error"


def test_unknown_and_not_found(handler: CommandHandler) -> None:
    run(handler, "/frobnicate")
    assert ("error", "Unknown command: /frobnicate") in handler.app.output_panel.lines

    run(handler, "/toggle nope")
    assert handler.app.output_panel.last() == ("error", "Task nope not found")


def test_rename_task(handler: CommandHandler) -> None:
    run(handler, "/task Old name")
    task = handler.manager.tasks[0]

    run(handler, f"/rename {task.id[:8]} New name")

    assert task.title == "New name"


def test_backup_and_version(handler: CommandHandler) -> None:
    run(handler, "/task Something")
    run(handler, "/backup")
    assert handler.app.output_panel.last()[0] == "success"

    run(handler, "/version")
    assert handler.app.output_panel.last() == ("line", "WAR ROOM 0.1.0")

    run(handler, "/exit")
    assert handler.app.exited
