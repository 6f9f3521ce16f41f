"""In-memory task/mission state with derived completion rules."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional, Union

from .models import Document, Mission, Task, new_id, now_ms
from .persistence import DocumentStore, SaveResult
from .undo import DEFAULT_UNDO_WINDOW, Deletion, MissionDeletion, TaskDeletion, UndoSlot
from .visibility import VisibilityMode, VisibleGroups, filter_for_visibility, is_eligible
from ..utils.logger import Logger


class StateManager:
    """Owns the document and every mutation on it.

    Each mutation updates the in-memory collections and then saves the whole
    document through ``store``. The outcome of the latest save is kept on
    ``last_save``; a failed save leaves the in-memory change in place.
    """

    def __init__(
        self,
        store: DocumentStore,
        document: Optional[Document] = None,
        logger: Optional[Logger] = None,
        clock: Callable[[], int] = now_ms,
        monotonic: Callable[[], float] = time.monotonic,
        undo_window: float = DEFAULT_UNDO_WINDOW,
    ) -> None:
        self.store = store
        self.document = document if document is not None else store.load()
        self.logger = logger
        self._clock = clock
        self.undo = UndoSlot(window=undo_window, monotonic=monotonic)
        self.last_save: Optional[SaveResult] = None
        # Stored data may hold completed missions with open tasks.
        if self._reconcile():
            self._persist()

    # ------------------------------------------------------------------ #
    # Collections
    # ------------------------------------------------------------------ #
    @property
    def tasks(self) -> List[Task]:
        return self.document.tasks

    @property
    def missions(self) -> List[Mission]:
        return self.document.missions

    @property
    def settings(self) -> Dict[str, Any]:
        return self.document.settings

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        return next((task for task in self.tasks if task.id == task_id), None)

    def get_mission(self, mission_id: str) -> Optional[Mission]:
        """Get mission by ID."""
        return next((mission for mission in self.missions if mission.id == mission_id), None)

    def tasks_for_mission(self, mission_id: str) -> List[Task]:
        return [task for task in self.tasks if task.mission_id == mission_id]

    def match_tasks(self, prefix: str) -> List[Task]:
        """Tasks whose id equals ``prefix``, or else starts with it."""
        exact = self.get_task(prefix)
        if exact:
            return [exact]
        return [task for task in self.tasks if prefix and task.id.startswith(prefix)]

    def match_missions(self, prefix: str) -> List[Mission]:
        exact = self.get_mission(prefix)
        if exact:
            return [exact]
        return [mission for mission in self.missions if prefix and mission.id.startswith(prefix)]

    # ------------------------------------------------------------------ #
    # Derived state
    # ------------------------------------------------------------------ #
    def compute_eligibility(self, mission_id: str) -> bool:
        """True iff the mission owns at least one task and all of them are done."""
        if self.get_mission(mission_id) is None:
            return False
        return is_eligible(self.tasks_for_mission(mission_id))

    def effective_completion(self, mission_id: str) -> bool:
        """Manual completion if set, otherwise eligibility as an advisory value."""
        mission = self.get_mission(mission_id)
        if mission is None:
            return False
        return mission.is_manually_completed or self.compute_eligibility(mission_id)

    def filter_for_visibility(self, mode: Union[VisibilityMode, str]) -> VisibleGroups:
        """Group the current collections for display. Raises ValueError on an unknown mode."""
        return filter_for_visibility(VisibilityMode(mode), self.missions, self.tasks)

    # ------------------------------------------------------------------ #
    # Task mutations
    # ------------------------------------------------------------------ #
    def add_task(self, title: str, mission_id: Optional[str] = None) -> Task:
        """Create a task and persist."""
        timestamp = self._clock()
        task = Task(
            id=new_id(),
            title=title,
            is_done=False,
            mission_id=mission_id,
            created_at=timestamp,
            updated_at=timestamp,
        )
        self.tasks.append(task)
        self._log("info", "task_added", task_id=task.id, title=task.title, mission_id=mission_id)
        if mission_id is not None:
            self._reconcile()
        self._persist()
        return task

    def toggle_task(self, task_id: str) -> Optional[Task]:
        """Flip a task's done flag."""
        task = self.get_task(task_id)
        if not task:
            self._not_found("task", task_id, "toggle_task")
            return None
        task.is_done = not task.is_done
        task.updated_at = self._clock()
        self._log("info", "task_toggled", task_id=task.id, is_done=task.is_done)
        self._reconcile()
        self._persist()
        return task

    def assign_task_to_mission(self, task_id: str, mission_id: Optional[str]) -> Optional[Task]:
        """Point a task at a mission, or detach it with ``None``.

        The mission id is not checked; a dangling id groups as standalone.
        """
        task = self.get_task(task_id)
        if not task:
            self._not_found("task", task_id, "assign_task_to_mission")
            return None
        task.mission_id = mission_id
        task.updated_at = self._clock()
        self._log("info", "task_assigned", task_id=task.id, mission_id=mission_id)
        self._reconcile()
        self._persist()
        return task

    def rename_task(self, task_id: str, title: str) -> Optional[Task]:
        task = self.get_task(task_id)
        if not task:
            self._not_found("task", task_id, "rename_task")
            return None
        task.title = title
        task.updated_at = self._clock()
        self._log("info", "task_renamed", task_id=task.id, title=title)
        self._persist()
        return task

    def delete_task(self, task_id: str) -> Optional[TaskDeletion]:
        """Remove a task; the returned payload is also held for undo."""
        index = self._task_index(task_id)
        if index is None:
            self._not_found("task", task_id, "delete_task")
            return None
        task = self.tasks.pop(index)
        reset = self._reconcile()
        deletion = TaskDeletion(task=task.copy(), index=index, reset_missions=reset)
        self.undo.hold(deletion)
        self._log("info", "task_deleted", task_id=task.id, index=index)
        self._persist()
        return deletion

    # ------------------------------------------------------------------ #
    # Mission mutations
    # ------------------------------------------------------------------ #
    def add_mission(self, title: str) -> Mission:
        """Create a mission and persist."""
        timestamp = self._clock()
        mission = Mission(
            id=new_id(),
            title=title,
            is_manually_completed=False,
            created_at=timestamp,
            updated_at=timestamp,
        )
        self.missions.append(mission)
        self._log("info", "mission_added", mission_id=mission.id, title=mission.title)
        self._persist()
        return mission

    def rename_mission(self, mission_id: str, title: str) -> Optional[Mission]:
        mission = self.get_mission(mission_id)
        if not mission:
            self._not_found("mission", mission_id, "rename_mission")
            return None
        mission.title = title
        mission.updated_at = self._clock()
        self._log("info", "mission_renamed", mission_id=mission.id, title=title)
        self._persist()
        return mission

    def set_mission_completed(self, mission_id: str, completed: bool = True) -> bool:
        """Set or clear manual completion.

        Completing only succeeds while the mission is eligible. Returns whether
        the flag ends up equal to ``completed``.
        """
        mission = self.get_mission(mission_id)
        if not mission:
            self._not_found("mission", mission_id, "set_mission_completed")
            return False
        if completed and not self.compute_eligibility(mission_id):
            self._log("info", "mission_not_eligible", mission_id=mission.id)
            return False
        if mission.is_manually_completed == completed:
            return True
        mission.is_manually_completed = completed
        mission.updated_at = self._clock()
        event = "mission_completed" if completed else "mission_reopened"
        self._log("info", event, mission_id=mission.id)
        self._persist()
        return True

    def delete_mission_only(self, mission_id: str) -> Optional[MissionDeletion]:
        """Remove a mission and detach its tasks."""
        index = self._mission_index(mission_id)
        if index is None:
            self._not_found("mission", mission_id, "delete_mission_only")
            return None
        mission = self.missions.pop(index)
        timestamp = self._clock()
        detached: List[Task] = []
        for task in self.tasks:
            if task.mission_id == mission_id:
                detached.append(task.copy())
                task.mission_id = None
                task.updated_at = timestamp
        deletion = MissionDeletion(mission=mission.copy(), index=index, cascade=False, detached=detached)
        self.undo.hold(deletion)
        self._log("info", "mission_deleted", mission_id=mission.id, cascade=False, tasks=len(detached))
        self._persist()
        return deletion

    def delete_mission_and_tasks(self, mission_id: str) -> Optional[MissionDeletion]:
        """Remove a mission together with every task that references it."""
        index = self._mission_index(mission_id)
        if index is None:
            self._not_found("mission", mission_id, "delete_mission_and_tasks")
            return None
        mission = self.missions.pop(index)
        removed = [(i, task) for i, task in enumerate(self.tasks) if task.mission_id == mission_id]
        self.document.tasks = [task for task in self.tasks if task.mission_id != mission_id]
        deletion = MissionDeletion(mission=mission.copy(), index=index, cascade=True, removed=removed)
        self.undo.hold(deletion)
        self._log("info", "mission_deleted", mission_id=mission.id, cascade=True, tasks=len(removed))
        self._persist()
        return deletion

    # ------------------------------------------------------------------ #
    # Undo
    # ------------------------------------------------------------------ #
    @property
    def pending_undo(self) -> Optional[Deletion]:
        return self.undo.peek()

    def undo_pending(self) -> bool:
        return self.undo.peek() is not None

    def expire_undo(self) -> bool:
        """Drop the pending deletion if its window has passed."""
        if self.undo.expire():
            self._log("debug", "undo_expired")
            return True
        return False

    def undo_last_delete(self) -> bool:
        """Reverse the most recent delete. Returns False when nothing can be undone."""
        if self.undo.expired():
            self.expire_undo()
        deletion = self.undo.take()
        if deletion is None:
            self._log("debug", "undo_unavailable")
            return False

        if isinstance(deletion, TaskDeletion):
            self.tasks.insert(min(deletion.index, len(self.tasks)), deletion.task.copy())
            for mission_id, updated_at in deletion.reset_missions.items():
                mission = self.get_mission(mission_id)
                if mission:
                    mission.is_manually_completed = True
                    mission.updated_at = updated_at
            self._log("info", "undo", kind="task", task_id=deletion.task.id)
        else:
            self.missions.insert(min(deletion.index, len(self.missions)), deletion.mission.copy())
            if deletion.cascade:
                for index, task in deletion.removed:
                    self.tasks.insert(min(index, len(self.tasks)), task.copy())
            else:
                for snapshot in deletion.detached:
                    task = self.get_task(snapshot.id)
                    if task and task.mission_id is None:
                        task.mission_id = snapshot.mission_id
                        task.updated_at = snapshot.updated_at
            self._log("info", "undo", kind="mission", mission_id=deletion.mission.id, cascade=deletion.cascade)

        self._reconcile()
        self._persist()
        return True

    # ------------------------------------------------------------------ #
    # Settings
    # ------------------------------------------------------------------ #
    def update_settings(self, **values: Any) -> Dict[str, Any]:
        self.settings.update(values)
        self._persist()
        return self.settings

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _reconcile(self) -> Dict[str, int]:
        """Clear manual completion on every mission that is no longer eligible.

        Returns the previous ``updated_at`` of each mission that was reset.
        """
        reset: Dict[str, int] = {}
        for mission in self.missions:
            if mission.is_manually_completed and not self.compute_eligibility(mission.id):
                reset[mission.id] = mission.updated_at
                mission.is_manually_completed = False
                mission.updated_at = self._clock()
                self._log("info", "mission_reset", mission_id=mission.id)
        return reset

    def _persist(self) -> SaveResult:
        self.last_save = self.store.save(self.document)
        return self.last_save

    def _task_index(self, task_id: str) -> Optional[int]:
        return next((i for i, task in enumerate(self.tasks) if task.id == task_id), None)

    def _mission_index(self, mission_id: str) -> Optional[int]:
        return next((i for i, mission in enumerate(self.missions) if mission.id == mission_id), None)

    def _not_found(self, kind: str, target_id: str, operation: str) -> None:
        self._log("warning", "not_found", kind=kind, id=target_id, operation=operation)

    def _log(self, level: str, event: str, **payload: Any) -> None:
        if self.logger:
            getattr(self.logger, level)(event, **payload)
