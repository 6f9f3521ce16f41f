"""Interactive TUI mode."""

from .app import WarRoomApp

__all__ = ["WarRoomApp"]
