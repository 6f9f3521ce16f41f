"""WAR ROOM CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import click

from . import __version__
from .bridge import HostBridge
from .config import Config
from .state.manager import StateManager
from .state.models import short_id
from .state.visibility import VisibilityMode, VisibleGroups

MODE_CHOICES = [mode.value for mode in VisibilityMode]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding config.toml (default: ~/.config/warroom)",
)
@click.pass_context
def main(ctx: click.Context, config_dir: Optional[Path]) -> None:
    """WAR ROOM - task and mission tracker."""
    ctx.obj = Config(config_dir)
    if ctx.invoked_subcommand is None:
        _start_tui(ctx.obj)


def _start_tui(config: Config) -> None:
    """Helper to launch the Textual TUI."""
    try:
        from .interactive import WarRoomApp
    except ImportError as exc:
        raise click.ClickException(f"Unable to start interactive mode: {exc}") from exc

    app = WarRoomApp(config)
    app.run()


def _bridge(ctx: click.Context) -> HostBridge:
    return HostBridge.from_config(ctx.find_root().obj)


def _manager(ctx: click.Context) -> StateManager:
    return _bridge(ctx).create_manager()


def _validate_title(ctx: click.Context, param: click.Parameter, value: str) -> str:
    title = value.strip()
    limit = ctx.find_root().obj.title_max_length
    if not title:
        raise click.BadParameter("title must not be empty")
    if len(title) > limit:
        raise click.BadParameter(f"title must be at most {limit} characters")
    return title


def _single(matches: Sequence, kind: str, raw: str):
    if not matches:
        raise click.ClickException(f"{kind.capitalize()} {raw} not found")
    if len(matches) > 1:
        raise click.ClickException(f"{kind.capitalize()} id {raw} is ambiguous ({len(matches)} matches)")
    return matches[0]


def _check_saved(manager: StateManager) -> None:
    if manager.last_save is not None and not manager.last_save.success:
        click.echo(f"Warning: changes were not saved: {manager.last_save.error}", err=True)


def format_groups(groups: VisibleGroups) -> List[str]:
    """Plain-text lines for a visibility grouping."""
    lines = [f"Mode: {groups.mode.value}"]
    if groups.is_empty():
        lines.append("  (nothing to show)")
        return lines
    for group in groups.missions:
        if group.mission.is_manually_completed:
            state = "completed"
        elif group.eligible:
            state = "ready"
        else:
            state = "open"
        lines.append(f"◆ {group.mission.title} [{short_id(group.mission.id)}] ({state})")
        for task in group.tasks:
            lines.append(f"    {_task_line(task)}")
    if groups.standalone:
        lines.append("Standalone")
        for task in groups.standalone:
            lines.append(f"    {_task_line(task)}")
    return lines


def _task_line(task) -> str:
    mark = "x" if task.is_done else " "
    return f"[{mark}] {task.title} [{short_id(task.id)}]"


@main.command()
@click.pass_context
def tui(ctx: click.Context) -> None:
    """Start Textual TUI."""
    _start_tui(ctx.find_root().obj)


@main.command(name="list")
@click.option("--mode", type=click.Choice(MODE_CHOICES), default=None, help="Visibility mode")
@click.pass_context
def list_cmd(ctx: click.Context, mode: Optional[str]) -> None:
    """Show missions and tasks."""
    manager = _manager(ctx)
    chosen = mode or ctx.find_root().obj.default_mode
    try:
        groups = manager.filter_for_visibility(chosen)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    for line in format_groups(groups):
        click.echo(line)


@main.command("add-task")
@click.argument("title", callback=_validate_title)
@click.option("--mission", "mission", default=None, help="Mission id (or unique prefix)")
@click.pass_context
def add_task(ctx: click.Context, title: str, mission: Optional[str]) -> None:
    """Create a task."""
    manager = _manager(ctx)
    mission_id = _single(manager.match_missions(mission), "mission", mission).id if mission else None
    task = manager.add_task(title, mission_id=mission_id)
    _check_saved(manager)
    click.echo(f"Task created: [{short_id(task.id)}] {task.title}")


@main.command("add-mission")
@click.argument("title", callback=_validate_title)
@click.pass_context
def add_mission(ctx: click.Context, title: str) -> None:
    """Create a mission."""
    manager = _manager(ctx)
    mission = manager.add_mission(title)
    _check_saved(manager)
    click.echo(f"Mission created: [{short_id(mission.id)}] {mission.title}")


@main.command()
@click.argument("task_id")
@click.pass_context
def toggle(ctx: click.Context, task_id: str) -> None:
    """Toggle a task between done and open."""
    manager = _manager(ctx)
    task = manager.toggle_task(_single(manager.match_tasks(task_id), "task", task_id).id)
    _check_saved(manager)
    click.echo(f"Task {task.title} marked as {'done' if task.is_done else 'open'}")


@main.command()
@click.argument("task_id")
@click.argument("mission_id")
@click.pass_context
def assign(ctx: click.Context, task_id: str, mission_id: str) -> None:
    """Assign a task to a mission (use "none" to detach)."""
    manager = _manager(ctx)
    task = _single(manager.match_tasks(task_id), "task", task_id)
    if mission_id.lower() == "none":
        manager.assign_task_to_mission(task.id, None)
        click.echo(f"Task {task.title} is now standalone")
    else:
        mission = _single(manager.match_missions(mission_id), "mission", mission_id)
        manager.assign_task_to_mission(task.id, mission.id)
        click.echo(f"Task {task.title} assigned to {mission.title}")
    _check_saved(manager)


@main.command()
@click.argument("mission_id")
@click.pass_context
def complete(ctx: click.Context, mission_id: str) -> None:
    """Mark a mission as completed (all of its tasks must be done)."""
    manager = _manager(ctx)
    mission = _single(manager.match_missions(mission_id), "mission", mission_id)
    if not manager.set_mission_completed(mission.id, True):
        raise click.ClickException(f"Mission {mission.title} still has open tasks")
    _check_saved(manager)
    click.echo(f"Mission {mission.title} completed")


@main.command()
@click.argument("mission_id")
@click.pass_context
def reopen(ctx: click.Context, mission_id: str) -> None:
    """Clear a mission's completed flag."""
    manager = _manager(ctx)
    mission = _single(manager.match_missions(mission_id), "mission", mission_id)
    manager.set_mission_completed(mission.id, False)
    _check_saved(manager)
    click.echo(f"Mission {mission.title} reopened")


@main.command()
@click.argument("target_id")
@click.argument("title", callback=_validate_title)
@click.pass_context
def rename(ctx: click.Context, target_id: str, title: str) -> None:
    """Rename a task or mission."""
    manager = _manager(ctx)
    tasks = manager.match_tasks(target_id)
    missions = manager.match_missions(target_id)
    target = _single(tasks + missions, "item", target_id)
    if tasks:
        manager.rename_task(target.id, title)
    else:
        manager.rename_mission(target.id, title)
    _check_saved(manager)
    click.echo(f"Renamed to {title}")


@main.command()
@click.argument("task_id")
@click.pass_context
def delete(ctx: click.Context, task_id: str) -> None:
    """Delete a task."""
    manager = _manager(ctx)
    task = _single(manager.match_tasks(task_id), "task", task_id)
    manager.delete_task(task.id)
    _check_saved(manager)
    click.echo(f"Task {task.title} deleted")


@main.command("delete-mission")
@click.argument("mission_id")
@click.option("--cascade", is_flag=True, help="Delete the mission's tasks too")
@click.pass_context
def delete_mission(ctx: click.Context, mission_id: str, cascade: bool) -> None:
    """Delete a mission, detaching its tasks unless --cascade is given."""
    manager = _manager(ctx)
    mission = _single(manager.match_missions(mission_id), "mission", mission_id)
    if cascade:
        deletion = manager.delete_mission_and_tasks(mission.id)
        click.echo(f"Mission {mission.title} deleted with {len(deletion.removed)} task(s)")
    else:
        deletion = manager.delete_mission_only(mission.id)
        click.echo(f"Mission {mission.title} deleted; {len(deletion.detached)} task(s) detached")
    _check_saved(manager)


@main.command()
@click.pass_context
def backup(ctx: click.Context) -> None:
    """Copy the data file into the backups folder."""
    result = _bridge(ctx).backup()
    if not result.success:
        raise click.ClickException(f"Backup failed: {result.error}")
    click.echo(f"Backup saved to {result.file}")


@main.command("open-folder")
@click.pass_context
def open_folder(ctx: click.Context) -> None:
    """Open the storage folder."""
    _bridge(ctx).open_storage_folder()


@main.command()
@click.pass_context
def path(ctx: click.Context) -> None:
    """Print the data file location."""
    click.echo(str(ctx.find_root().obj.data_file))


if __name__ == "__main__":
    main()
