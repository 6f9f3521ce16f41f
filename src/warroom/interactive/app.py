"""Textual application for interactive mode."""

from __future__ import annotations

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.timer import Timer
from textual.widgets import Footer

from .commands import CommandHandler
from .widgets import (
    CASCADE,
    NO_MISSION,
    MissionBoard,
    MissionDeleteModal,
    MissionPickerModal,
    NewItemModal,
    OutputPanel,
    TopBar,
)
from ..bridge import HostBridge
from ..config import Config
from ..state.visibility import VisibilityMode


class WarRoomApp(App):
    """WAR ROOM interactive mode TUI."""

    TITLE = "WAR ROOM"

    CSS = """
    Screen {
        layout: grid;
        grid-size: 2 2;
        grid-rows: 1fr auto;
        grid-columns: 3fr 2fr;
        overflow: hidden;
    }

    #mission-board {
        border: tall $primary;
        padding: 0;
        overflow-y: auto;
    }

    #output-panel {
        border: tall $primary;
        padding: 0;
        overflow-y: auto;
    }

    Footer {
        column-span: 2;
        background: $primary;
    }
    """

    BINDINGS = [
        Binding("ctrl+n", "new_task", "New Task"),
        Binding("ctrl+k", "new_mission", "New Mission"),
        Binding("ctrl+a", "assign", "Assign"),
        Binding("ctrl+r", "rename", "Rename"),
        Binding("ctrl+d", "delete", "Delete"),
        Binding("ctrl+z", "undo", "Undo"),
        Binding("ctrl+t", "cycle_mode", "Mode"),
        Binding("ctrl+b", "backup", "Backup"),
        Binding("ctrl+c", "exit_app", "Quit"),
        Binding("/", "focus_command", "Help", show=True, key_display="/help"),
    ]

    def __init__(self, config: Config, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config
        self.bridge = HostBridge.from_config(config)
        self.manager = self.bridge.create_manager()
        self.command_handler = CommandHandler(self.manager, self.bridge, self)
        self.title_max_length = config.title_max_length
        self.mode = self._initial_mode()
        self._undo_timer: Optional[Timer] = None

    def _initial_mode(self) -> VisibilityMode:
        stored = self.manager.settings.get("visibilityMode") or self.config.default_mode
        try:
            return VisibilityMode(stored)
        except ValueError:
            return VisibilityMode.OVERVIEW

    def compose(self) -> ComposeResult:
        yield TopBar(status=self._status_text(), id="top-bar")

        self.board = MissionBoard(id="mission-board")
        self.output_panel = OutputPanel(id="output-panel")

        yield self.board
        yield self.output_panel
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_board()
        self.output_panel.write_line(f"WAR ROOM {self.bridge.get_version()}")
        self.output_panel.write_line(f"[dim]Data: {self.bridge.store.data_file}[/dim]")
        self.output_panel.write_line("Type a title to add a task, or /help for commands")

    # ------------------------------------------------------------------ #
    # Hooks used by the command handler
    # ------------------------------------------------------------------ #
    def refresh_board(self, select_id: Optional[str] = None) -> None:
        """Re-derive the visible grouping and redraw."""
        groups = self.manager.filter_for_visibility(self.mode)
        self.board.update_groups(groups, select_id=select_id)
        self._update_status()

    def set_mode(self, mode: VisibilityMode) -> None:
        self.mode = mode
        self.manager.update_settings(visibilityMode=mode.value)
        self.refresh_board()

    def start_undo_timer(self) -> None:
        self.stop_undo_timer()
        self._undo_timer = self.set_timer(self.manager.undo.window, self._on_undo_expired)
        self._update_status()

    def stop_undo_timer(self) -> None:
        if self._undo_timer is not None:
            self._undo_timer.stop()
            self._undo_timer = None
        self._update_status()

    def _on_undo_expired(self) -> None:
        self._undo_timer = None
        if self.manager.expire_undo():
            self.output_panel.write_line("[dim]Undo window closed[/dim]")
        self._update_status()

    def _status_text(self) -> str:
        status = (
            f"WAR ROOM - {self.mode.value} - "
            f"{len(self.manager.tasks)} task(s), {len(self.manager.missions)} mission(s)"
        )
        if self.manager.undo_pending():
            status += " - ctrl+z to undo"
        return status

    def _update_status(self) -> None:
        self.query_one("#top-bar", TopBar).update_status(self._status_text())

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #
    async def on_top_bar_command_submitted(self, event: TopBar.CommandSubmitted) -> None:
        await self.command_handler.handle(event.command)

    async def on_mission_board_entry_activated(self, event: MissionBoard.EntryActivated) -> None:
        """Enter toggles a task, or completes/reopens a mission."""
        entry = event.entry
        if entry.kind == "task":
            await self.command_handler.cmd_toggle(entry.id)
            return
        mission = self.manager.get_mission(entry.id)
        if mission is None:
            return
        if mission.is_manually_completed:
            await self.command_handler.cmd_reopen(entry.id)
        else:
            await self.command_handler.cmd_complete(entry.id)

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #
    def action_new_task(self) -> None:
        self.run_worker(self._prompt_new("New Task", self.command_handler.cmd_task))

    def action_new_mission(self) -> None:
        self.run_worker(self._prompt_new("New Mission", self.command_handler.cmd_mission))

    async def _prompt_new(self, heading: str, handler) -> None:
        result = await self.push_screen_wait(NewItemModal(heading, max_length=self.title_max_length))
        if result:
            await handler(result)

    def action_rename(self) -> None:
        entry = self.board.selected_entry()
        if entry is None:
            self.output_panel.write_warning("Select a task or mission first")
            return
        self.run_worker(self._prompt_rename(entry.id, entry.title))

    async def _prompt_rename(self, target_id: str, current: str) -> None:
        result = await self.push_screen_wait(
            NewItemModal("Rename", max_length=self.title_max_length, initial=current)
        )
        if result:
            await self.command_handler.cmd_rename(f"{target_id} {result}")

    def action_assign(self) -> None:
        entry = self.board.selected_entry()
        if entry is None or entry.kind != "task":
            self.output_panel.write_warning("Select a task to assign")
            return
        self.run_worker(self._prompt_assign(entry.id))

    async def _prompt_assign(self, task_id: str) -> None:
        task = self.manager.get_task(task_id)
        if task is None:
            return
        result = await self.push_screen_wait(
            MissionPickerModal(task.title, list(self.manager.missions), task.mission_id)
        )
        if result is None:
            return
        target = "none" if result == NO_MISSION else result
        await self.command_handler.cmd_assign(f"{task_id} {target}")

    def action_delete(self) -> None:
        entry = self.board.selected_entry()
        if entry is None:
            self.output_panel.write_warning("Select a task or mission to delete")
            return
        if entry.kind == "task":
            self.run_worker(self.command_handler.cmd_delete(entry.id))
        else:
            self.run_worker(self._confirm_mission_delete(entry.id))

    async def _confirm_mission_delete(self, mission_id: str) -> None:
        mission = self.manager.get_mission(mission_id)
        if mission is None:
            return
        owned = len(self.manager.tasks_for_mission(mission_id))
        choice = await self.push_screen_wait(MissionDeleteModal(mission.title, owned))
        if choice is None:
            return
        self.command_handler.delete_mission(mission_id, cascade=choice == CASCADE)

    def action_undo(self) -> None:
        self.run_worker(self.command_handler.cmd_undo(""))

    def action_cycle_mode(self) -> None:
        self.set_mode(self.mode.next())
        self.output_panel.write_line(f"Mode: {self.mode.value}")

    def action_backup(self) -> None:
        self.run_worker(self.command_handler.cmd_backup(""))

    def action_focus_command(self) -> None:
        """Focus the command input and pre-fill with /help."""
        input_widget = self.query_one("#command-input")
        input_widget.value = "/help"
        input_widget.cursor_position = len(input_widget.value)
        self.set_focus(input_widget)

    def action_exit_app(self) -> None:
        self.exit()
