"""In-memory linear undo/redo history."""

from .history import (
    ChangeRecord,
    Direction,
    HistoryView,
    RewindOptions,
    StateRewind,
)

__all__ = [
    "ChangeRecord",
    "Direction",
    "HistoryView",
    "RewindOptions",
    "StateRewind",
    "history",
    "runtime",
]

__version__ = "0.1.0"
