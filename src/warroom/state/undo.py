"""Single pending-undo slot for delete operations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from .models import Mission, Task

DEFAULT_UNDO_WINDOW = 6.0


@dataclass
class TaskDeletion:
    """A removed task and where it sat in the task list."""

    task: Task
    index: int
    # Mission flags cleared by reconciliation after the delete, keyed by id.
    reset_missions: Dict[str, int] = field(default_factory=dict)


@dataclass
class MissionDeletion:
    """A removed mission plus the tasks it affected.

    ``cascade`` is False when tasks were detached (``detached`` holds their
    pre-delete snapshots) and True when tasks were removed (``removed`` holds
    ``(index, task)`` pairs in ascending index order).
    """

    mission: Mission
    index: int
    cascade: bool
    detached: List[Task] = field(default_factory=list)
    removed: List[Tuple[int, Task]] = field(default_factory=list)


Deletion = Union[TaskDeletion, MissionDeletion]


class UndoSlot:
    """Holds at most one deletion, which expires after ``window`` seconds."""

    def __init__(
        self,
        window: float = DEFAULT_UNDO_WINDOW,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window = window
        self._monotonic = monotonic
        self._pending: Optional[Deletion] = None
        self._expires_at = 0.0

    def hold(self, deletion: Deletion) -> None:
        """Replace whatever was pending with ``deletion``."""
        self._pending = deletion
        self._expires_at = self._monotonic() + self.window

    def peek(self) -> Optional[Deletion]:
        if self._pending is None or self.expired():
            return None
        return self._pending

    def take(self) -> Optional[Deletion]:
        """Return the pending deletion and clear the slot."""
        deletion = self.peek()
        self.clear()
        return deletion

    def expired(self) -> bool:
        return self._pending is not None and self._monotonic() >= self._expires_at

    def expire(self) -> bool:
        """Clear the slot if its window has passed. Returns True if something was cleared."""
        if self.expired():
            self.clear()
            return True
        return False

    def remaining(self) -> float:
        if self._pending is None:
            return 0.0
        return max(0.0, self._expires_at - self._monotonic())

    def clear(self) -> None:
        self._pending = None
        self._expires_at = 0.0
