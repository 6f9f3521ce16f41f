"""WAR ROOM - task and mission tracker."""

__version__ = "0.1.0"
__author__ = "WAR ROOM Contributors"

from .config import Config
from .state.manager import StateManager
from .state.models import Document, Mission, Task
from .state.persistence import DocumentStore
from .state.visibility import VisibilityMode

__all__ = ["Config", "StateManager", "Document", "Mission", "Task", "DocumentStore", "VisibilityMode"]
