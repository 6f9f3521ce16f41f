"""Interactive mode widgets."""

from .mission_board import BoardEntry, MissionBoard
from .mission_delete_modal import CASCADE, DETACH, MissionDeleteModal
from .mission_picker_modal import NO_MISSION, MissionPickerModal
from .new_item_modal import NewItemModal
from .output_panel import OutputPanel
from .top_bar import TopBar

__all__ = [
    "BoardEntry",
    "MissionBoard",
    "CASCADE",
    "DETACH",
    "MissionDeleteModal",
    "NO_MISSION",
    "MissionPickerModal",
    "NewItemModal",
    "OutputPanel",
    "TopBar",
]
