"""Task, mission and document records."""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List, Optional


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Generate a new opaque identifier."""
    return str(uuid.uuid4())


def short_id(value: str, length: int = 8) -> str:
    return value[:length]


DEFAULT_SETTINGS: Dict[str, Any] = {
    "showCompletedTasks": True,
    "showCompletedMissions": True,
    "theme": "dark",
}


class Task:
    """A single work item, optionally owned by a mission."""

    def __init__(
        self,
        id: str,
        title: str,
        is_done: bool = False,
        mission_id: Optional[str] = None,
        created_at: Optional[int] = None,
        updated_at: Optional[int] = None,
    ) -> None:
        self.id = id
        self.title = title
        self.is_done = is_done
        self.mission_id = mission_id
        timestamp = now_ms()
        self.created_at = created_at if created_at is not None else timestamp
        self.updated_at = updated_at if updated_at is not None else self.created_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted (camelCase) form."""
        return {
            "id": self.id,
            "title": self.title,
            "isDone": self.is_done,
            "missionId": self.mission_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Task":
        """Create from the persisted form."""
        mission_id = data.get("missionId")
        return Task(
            id=str(data["id"]),
            title=str(data["title"]),
            is_done=data.get("isDone") is True,
            mission_id=str(mission_id) if mission_id is not None else None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def copy(self) -> "Task":
        return Task.from_dict(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        state = "done" if self.is_done else "open"
        return f"Task({self.id!r}, {self.title!r}, {state}, mission={self.mission_id!r})"


class Mission:
    """A named grouping of tasks with its own completion flag."""

    def __init__(
        self,
        id: str,
        title: str,
        is_manually_completed: bool = False,
        created_at: Optional[int] = None,
        updated_at: Optional[int] = None,
    ) -> None:
        self.id = id
        self.title = title
        self.is_manually_completed = is_manually_completed
        timestamp = now_ms()
        self.created_at = created_at if created_at is not None else timestamp
        self.updated_at = updated_at if updated_at is not None else self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "isManuallyCompleted": self.is_manually_completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Mission":
        return Mission(
            id=str(data["id"]),
            title=str(data["title"]),
            is_manually_completed=data.get("isManuallyCompleted") is True,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def copy(self) -> "Mission":
        return Mission.from_dict(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mission):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        flag = "completed" if self.is_manually_completed else "open"
        return f"Mission({self.id!r}, {self.title!r}, {flag})"


class Document:
    """The persisted aggregate: tasks, missions and settings."""

    def __init__(
        self,
        tasks: Optional[List[Task]] = None,
        missions: Optional[List[Mission]] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.tasks: List[Task] = tasks if tasks is not None else []
        self.missions: List[Mission] = missions if missions is not None else []
        self.settings: Dict[str, Any] = {**DEFAULT_SETTINGS, **(settings or {})}

    @staticmethod
    def default() -> "Document":
        """Empty collections with default settings."""
        return Document()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [task.to_dict() for task in self.tasks],
            "missions": [mission.to_dict() for mission in self.missions],
            "settings": dict(self.settings),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Document":
        """Build a document, skipping entries without an id or title."""
        tasks: List[Task] = []
        missions: List[Mission] = []

        raw_tasks = data.get("tasks")
        if isinstance(raw_tasks, list):
            for entry in raw_tasks:
                if isinstance(entry, dict) and entry.get("id") and entry.get("title") is not None:
                    tasks.append(Task.from_dict(entry))

        raw_missions = data.get("missions")
        if isinstance(raw_missions, list):
            for entry in raw_missions:
                if isinstance(entry, dict) and entry.get("id") and entry.get("title") is not None:
                    missions.append(Mission.from_dict(entry))

        settings = data.get("settings")
        return Document(
            tasks=tasks,
            missions=missions,
            settings=settings if isinstance(settings, dict) else None,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.to_dict() == other.to_dict()
