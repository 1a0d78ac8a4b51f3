"""Change records and the callback shapes attached to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

Action = Callable[[], object]
ChangeObserver = Callable[[], object]


class Direction(str, Enum):
    """Which way the history is moving when an action runs."""

    FORWARD = "forward"
    BACKWARD = "backward"


DefaultHandler = Callable[[Direction, Any], object]


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One history entry: an opaque change plus optional replay actions."""

    change: Any
    forward: Optional[Action] = None
    backward: Optional[Action] = None

    def action_for(self, direction: Direction) -> Optional[Action]:
        if direction is Direction.FORWARD:
            return self.forward
        return self.backward


def invoke_action(
    record: ChangeRecord,
    direction: Direction,
    fallback: Optional[DefaultHandler],
) -> bool:
    """Run the record's own action for ``direction``, else ``fallback``.

    Returns ``False`` when neither is available and nothing ran.
    """

    action = record.action_for(direction)
    if action is not None:
        action()
        return True
    if fallback is not None:
        fallback(direction, record.change)
        return True
    return False


__all__ = [
    "Action",
    "ChangeObserver",
    "ChangeRecord",
    "DefaultHandler",
    "Direction",
    "invoke_action",
]
