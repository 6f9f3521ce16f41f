"""Command handlers for interactive mode."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from ..bridge import HostBridge
from ..state.manager import StateManager
from ..state.models import short_id
from ..state.visibility import VisibilityMode

HELP_TEXT = """
[bold]WAR ROOM Commands[/bold]

Type any text (without /) to add it as a standalone task.

Tasks:
  /task <title>                 Add a standalone task
  /toggle <id>                  Mark a task done / open
  /assign <task> <mission|none> Put a task under a mission
  /rename <id> <title>          Rename a task or mission
  /delete <id>                  Delete a task

Missions:
  /mission <title>              Add a mission
  /complete <id>                Mark a mission completed (all tasks done)
  /reopen <id>                  Clear a mission's completed flag
  /delete-mission <id> [--cascade]
                                Delete a mission (keep or delete its tasks)

Other:
  /undo                         Undo the last delete (6s window)
  /mode [overview|focus|accomplishment]
                                Switch visibility mode (cycles without argument)
  /backup                       Copy the data file to the backups folder
  /folder                       Open the storage folder
  /version                      Show the version
  /help                         Show this help
  /exit                         Quit

Ids can be shortened to any unique prefix.
"""


class CommandHandler:
    """Handles interactive mode commands."""

    def __init__(self, manager: StateManager, bridge: HostBridge, app):
        self.manager = manager
        self.bridge = bridge
        self.app = app

        self.commands: Dict[str, Callable] = {
            "/help": self.cmd_help,
            "/task": self.cmd_task,
            "/mission": self.cmd_mission,
            "/toggle": self.cmd_toggle,
            "/assign": self.cmd_assign,
            "/complete": self.cmd_complete,
            "/reopen": self.cmd_reopen,
            "/rename": self.cmd_rename,
            "/delete": self.cmd_delete,
            "/delete-mission": self.cmd_delete_mission,
            "/undo": self.cmd_undo,
            "/mode": self.cmd_mode,
            "/backup": self.cmd_backup,
            "/folder": self.cmd_folder,
            "/version": self.cmd_version,
            "/exit": self.cmd_exit,
        }

    @property
    def output(self):
        return self.app.output_panel

    async def handle(self, command: str) -> None:
        if command.startswith("/"):
            parts = command.split(maxsplit=1)
            cmd = parts[0]
            args = parts[1].strip() if len(parts) > 1 else ""

            handler = self.commands.get(cmd)
            if handler:
                await handler(args)
            else:
                self.output.write_error(f"Unknown command: {cmd}")
                self.output.write_line("Type /help for available commands")
        else:
            await self.cmd_task(command)

    async def cmd_help(self, args: str) -> None:
        self.output.write_section("Help", HELP_TEXT)

    async def cmd_task(self, args: str) -> None:
        title = self._title(args, "/task <title>")
        if title is None:
            return
        task = self.manager.add_task(title)
        self.output.write_success(f"Task created: [{short_id(task.id)}] {task.title}")
        self._after_change(select_id=task.id)

    async def cmd_mission(self, args: str) -> None:
        title = self._title(args, "/mission <title>")
        if title is None:
            return
        mission = self.manager.add_mission(title)
        self.output.write_success(f"Mission created: [{short_id(mission.id)}] {mission.title}")
        self._after_change(select_id=mission.id)

    async def cmd_toggle(self, args: str) -> None:
        if not args:
            self.output.write_error("Usage: /toggle <task_id>")
            return
        task = self._one(self.manager.match_tasks(args), "Task", args)
        if not task:
            return
        self.manager.toggle_task(task.id)
        self.output.write_success(f"Task {task.title} marked as {'done' if task.is_done else 'open'}")
        self._after_change(select_id=task.id)

    async def cmd_assign(self, args: str) -> None:
        parts = args.split()
        if len(parts) != 2:
            self.output.write_error("Usage: /assign <task_id> <mission_id|none>")
            return
        task = self._one(self.manager.match_tasks(parts[0]), "Task", parts[0])
        if not task:
            return
        if parts[1].lower() == "none":
            self.manager.assign_task_to_mission(task.id, None)
            self.output.write_success(f"Task {task.title} is now standalone")
        else:
            mission = self._one(self.manager.match_missions(parts[1]), "Mission", parts[1])
            if not mission:
                return
            self.manager.assign_task_to_mission(task.id, mission.id)
            self.output.write_success(f"Task {task.title} assigned to {mission.title}")
        self._after_change(select_id=task.id)

    async def cmd_complete(self, args: str) -> None:
        if not args:
            self.output.write_error("Usage: /complete <mission_id>")
            return
        mission = self._one(self.manager.match_missions(args), "Mission", args)
        if not mission:
            return
        if self.manager.set_mission_completed(mission.id, True):
            self.output.write_success(f"Mission {mission.title} completed")
            self._after_change(select_id=mission.id)
        else:
            self.output.write_warning(f"Mission {mission.title} still has open tasks")

    async def cmd_reopen(self, args: str) -> None:
        if not args:
            self.output.write_error("Usage: /reopen <mission_id>")
            return
        mission = self._one(self.manager.match_missions(args), "Mission", args)
        if not mission:
            return
        self.manager.set_mission_completed(mission.id, False)
        self.output.write_success(f"Mission {mission.title} reopened")
        self._after_change(select_id=mission.id)

    async def cmd_rename(self, args: str) -> None:
        parts = args.split(maxsplit=1)
        if len(parts) != 2:
            self.output.write_error("Usage: /rename <id> <title>")
            return
        title = self._title(parts[1], "/rename <id> <title>")
        if title is None:
            return
        tasks = self.manager.match_tasks(parts[0])
        target = self._one(tasks + self.manager.match_missions(parts[0]), "Item", parts[0])
        if not target:
            return
        if tasks:
            self.manager.rename_task(target.id, title)
        else:
            self.manager.rename_mission(target.id, title)
        self.output.write_success(f"Renamed to {title}")
        self._after_change(select_id=target.id)

    async def cmd_delete(self, args: str) -> None:
        if not args:
            self.output.write_error("Usage: /delete <task_id>")
            return
        task = self._one(self.manager.match_tasks(args), "Task", args)
        if not task:
            return
        self.manager.delete_task(task.id)
        self.output.write_success(f"Task {task.title} deleted (/undo to restore)")
        self._after_change()
        self.app.start_undo_timer()

    async def cmd_delete_mission(self, args: str) -> None:
        parts = args.split()
        cascade = "--cascade" in parts
        ids = [part for part in parts if part != "--cascade"]
        if len(ids) != 1:
            self.output.write_error("Usage: /delete-mission <mission_id> [--cascade]")
            return
        mission = self._one(self.manager.match_missions(ids[0]), "Mission", ids[0])
        if not mission:
            return
        self.delete_mission(mission.id, cascade)

    def delete_mission(self, mission_id: str, cascade: bool) -> None:
        """Shared by the command and the delete confirmation modal."""
        if cascade:
            deletion = self.manager.delete_mission_and_tasks(mission_id)
            if deletion is None:
                return
            self.output.write_success(
                f"Mission {deletion.mission.title} deleted with {len(deletion.removed)} task(s) (/undo to restore)"
            )
        else:
            deletion = self.manager.delete_mission_only(mission_id)
            if deletion is None:
                return
            self.output.write_success(
                f"Mission {deletion.mission.title} deleted; {len(deletion.detached)} task(s) kept (/undo to restore)"
            )
        self._after_change()
        self.app.start_undo_timer()

    async def cmd_undo(self, args: str) -> None:
        if self.manager.undo_last_delete():
            self.output.write_success("Last delete undone")
            self._after_change()
            self.app.stop_undo_timer()
        else:
            self.output.write_warning("Nothing to undo")

    async def cmd_mode(self, args: str) -> None:
        if args:
            try:
                mode = VisibilityMode(args.lower())
            except ValueError:
                choices = ", ".join(m.value for m in VisibilityMode)
                self.output.write_error(f"Unknown mode: {args} (choose {choices})")
                return
        else:
            mode = self.app.mode.next()
        self.app.set_mode(mode)
        self.output.write_line(f"Mode: {mode.value}")

    async def cmd_backup(self, args: str) -> None:
        result = self.bridge.backup()
        if result.success:
            self.output.write_success(f"Backup saved to {result.file}")
        else:
            self.output.write_error(f"Backup failed: {result.error}")

    async def cmd_folder(self, args: str) -> None:
        self.bridge.open_storage_folder()
        self.output.write_line(f"Opened {self.bridge.store.data_file.parent}")

    async def cmd_version(self, args: str) -> None:
        self.output.write_line(f"WAR ROOM {self.bridge.get_version()}")

    async def cmd_exit(self, args: str) -> None:
        self.app.exit()

    def _title(self, raw: str, usage: str) -> Optional[str]:
        title = raw.strip()
        limit = self.app.title_max_length
        if not title:
            self.output.write_error(f"Usage: {usage}")
            return None
        if len(title) > limit:
            self.output.write_error(f"Title must be at most {limit} characters")
            return None
        return title

    def _one(self, matches: Sequence, kind: str, raw: str):
        if not matches:
            self.output.write_error(f"{kind} {raw} not found")
            return None
        if len(matches) > 1:
            self.output.write_error(f"{kind} id {raw} is ambiguous ({len(matches)} matches)")
            return None
        return matches[0]

    def _after_change(self, select_id: Optional[str] = None) -> None:
        result = self.manager.last_save
        if result is not None and not result.success:
            self.output.write_warning(f"Changes were not saved: {result.error}")
        self.app.refresh_board(select_id=select_id)
