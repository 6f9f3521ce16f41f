"""State management modules."""

from .manager import StateManager
from .models import Document, Mission, Task
from .persistence import BackupResult, DocumentStore, Persistence, SaveResult
from .undo import MissionDeletion, TaskDeletion, UndoSlot
from .visibility import MissionGroup, VisibilityMode, VisibleGroups, filter_for_visibility

__all__ = [
    "StateManager",
    "Document",
    "Mission",
    "Task",
    "BackupResult",
    "DocumentStore",
    "Persistence",
    "SaveResult",
    "MissionDeletion",
    "TaskDeletion",
    "UndoSlot",
    "MissionGroup",
    "VisibilityMode",
    "VisibleGroups",
    "filter_for_visibility",
]
