"""History records, squashing, and the undo/redo manager."""

from .options import DEFAULT_HISTORY_LOGGER, RewindOptions
from .records import ChangeRecord, Direction, invoke_action
from .squash import SquashOutcome, squash_records, squash_tail
from .timeline import HistoryView, StateRewind

__all__ = [
    "ChangeRecord",
    "Direction",
    "invoke_action",
    "SquashOutcome",
    "squash_records",
    "squash_tail",
    "RewindOptions",
    "DEFAULT_HISTORY_LOGGER",
    "HistoryView",
    "StateRewind",
]
