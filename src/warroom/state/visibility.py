"""Visibility modes and the pure filter that groups tasks under missions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from .models import Mission, Task


class VisibilityMode(Enum):
    OVERVIEW = "overview"
    FOCUS = "focus"
    ACCOMPLISHMENT = "accomplishment"

    def next(self) -> "VisibilityMode":
        """The mode after this one, wrapping around."""
        members = list(VisibilityMode)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class MissionGroup:
    mission: Mission
    tasks: List[Task] = field(default_factory=list)
    eligible: bool = False


@dataclass
class VisibleGroups:
    mode: VisibilityMode
    missions: List[MissionGroup] = field(default_factory=list)
    standalone: List[Task] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.missions and not self.standalone


def is_eligible(owned: Sequence[Task]) -> bool:
    """A mission is eligible when it owns at least one task and all of them are done."""
    return bool(owned) and all(task.is_done for task in owned)


def group_tasks(missions: Iterable[Mission], tasks: Iterable[Task]) -> tuple[Dict[str, List[Task]], List[Task]]:
    """Split tasks into per-mission lists and standalone tasks.

    A task whose ``mission_id`` does not match any mission counts as standalone.
    """
    owned: Dict[str, List[Task]] = {mission.id: [] for mission in missions}
    standalone: List[Task] = []
    for task in tasks:
        if task.mission_id is not None and task.mission_id in owned:
            owned[task.mission_id].append(task)
        else:
            standalone.append(task)
    return owned, standalone


def filter_for_visibility(
    mode: VisibilityMode,
    missions: Sequence[Mission],
    tasks: Sequence[Task],
) -> VisibleGroups:
    """Build the renderable grouping for ``mode`` without touching the inputs."""
    if not isinstance(mode, VisibilityMode):
        raise ValueError(f"Unknown visibility mode: {mode!r}")

    owned, standalone = group_tasks(missions, tasks)
    result = VisibleGroups(mode=mode)

    for mission in missions:
        mission_tasks = owned[mission.id]
        eligible = is_eligible(mission_tasks)

        if mode is VisibilityMode.OVERVIEW:
            visible = list(mission_tasks)
        elif mode is VisibilityMode.FOCUS:
            if mission.is_manually_completed:
                continue
            visible = list(mission_tasks)
        elif mode is VisibilityMode.ACCOMPLISHMENT:
            if not mission.is_manually_completed:
                continue
            visible = [task for task in mission_tasks if task.is_done]
        else:  # pragma: no cover - enum is exhaustive
            raise ValueError(f"Unhandled visibility mode: {mode!r}")

        result.missions.append(MissionGroup(mission=mission, tasks=visible, eligible=eligible))

    if mode is VisibilityMode.OVERVIEW:
        result.standalone = list(standalone)
    elif mode is VisibilityMode.FOCUS:
        result.standalone = [task for task in standalone if not task.is_done]
    elif mode is VisibilityMode.ACCOMPLISHMENT:
        result.standalone = [task for task in standalone if task.is_done]

    return result
