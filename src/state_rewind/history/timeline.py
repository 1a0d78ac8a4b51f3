"""Linear undo/redo history with squashing and change notification."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, ContextManager, Iterable, List, Optional

from state_rewind.runtime import telemetry

from .options import RewindOptions
from .records import (
    Action,
    ChangeObserver,
    ChangeRecord,
    DefaultHandler,
    Direction,
    invoke_action,
)
from .squash import Compare, Modify, SquashOutcome, squash_records, squash_tail


@dataclass(frozen=True, slots=True)
class HistoryView:
    """Read-only snapshot of the whole history, redo tail included."""

    revision: int
    changes: tuple[Any, ...]
    index: int
    can_undo: bool
    can_redo: bool


class StateRewind:
    """Records changes and steps backward and forward through them.

    ``index`` always points at the active record, the one ``get()`` returns;
    ``-1`` means nothing is active. Records past ``index`` were undone and are
    dropped by the next ``set``/``execute``. Mutating methods return the
    manager so calls can be chained.
    """

    def __init__(
        self,
        options: Optional[RewindOptions] = None,
        *,
        log: Optional[bool] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        base = options or RewindOptions()
        self.options = RewindOptions(
            log=base.log if log is None else log,
            logger_name=logger_name or base.logger_name,
        )
        self._records: List[ChangeRecord] = []
        self._index: int = -1
        self._revision = 0
        self._on_change: Optional[ChangeObserver] = None
        self._default_callback: Optional[DefaultHandler] = None
        self._trace("init", log=self.options.log)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def index(self) -> int:
        return self._index

    def revision(self) -> int:
        return self._revision

    def set(
        self,
        change: Any,
        forward: Optional[Action] = None,
        backward: Optional[Action] = None,
    ) -> "StateRewind":
        self._trace("set", index=self._index + 1)
        records = self._records[: self._index + 1]
        records.append(
            ChangeRecord(change=change, forward=forward, backward=backward)
        )
        self._records = records
        self._index += 1
        self._notify()
        return self

    def execute(
        self,
        change: Any,
        forward: Optional[Action] = None,
        backward: Optional[Action] = None,
    ) -> "StateRewind":
        """Record ``change`` and run its forward action straight away."""

        self.set(change, forward, backward)
        self._trace("execute", index=self._index)
        invoke_action(
            self._records[self._index], Direction.FORWARD, self._default_callback
        )
        return self

    def can_undo(self) -> bool:
        return self._index != -1

    def undo(self) -> "StateRewind":
        if not self.can_undo():
            self._trace("undo.noop")
            return self
        self._trace("undo", index=self._index)
        invoke_action(
            self._records[self._index], Direction.BACKWARD, self._default_callback
        )
        self._index -= 1
        self._notify()
        return self

    def can_redo(self) -> bool:
        return self._index != len(self._records) - 1

    def redo(self) -> "StateRewind":
        if not self.can_redo():
            self._trace("redo.noop")
            return self
        self._index += 1
        self._trace("redo", index=self._index)
        invoke_action(
            self._records[self._index], Direction.FORWARD, self._default_callback
        )
        self._notify()
        return self

    def get(self, default: Any = None) -> Any:
        if self._index == -1:
            self._trace("get.empty")
            return default
        return self._records[self._index].change

    def get_all(self) -> List[Any]:
        """Changes up to and including the active one, oldest first."""

        if self._index == -1:
            self._trace("get_all.empty")
            return []
        return [record.change for record in self._records[: self._index + 1]]

    def remove_index(self, index: int, run_callback: bool = True) -> "StateRewind":
        """Drop the record at ``index``, optionally unwinding it first.

        Works on undone records too. The cursor follows the active record.
        """

        self._trace("remove_index", index=index, run_callback=run_callback)
        if index < 0 or index >= len(self._records):
            self._trace("remove_index.missing", index=index)
            return self

        record = self._records[index]
        if run_callback:
            invoke_action(record, Direction.BACKWARD, self._default_callback)
        self._records = self._records[:index] + self._records[index + 1 :]
        if index <= self._index:
            self._index -= 1
        self._notify()
        return self

    def clear(self) -> "StateRewind":
        """Remove every record, unwinding only the ones still applied."""

        self._trace("clear", size=len(self._records))
        for index in reversed(range(len(self._records))):
            self.remove_index(index, run_callback=index <= self._index)
        return self

    def squash(
        self, compare: Compare, modify: Optional[Modify] = None
    ) -> "StateRewind":
        with self._span("squash"):
            outcome = squash_records(self._records, self._index, compare, modify)
        self._apply(outcome, "squash")
        return self

    def squash_last(
        self, compare: Compare, modify: Optional[Modify] = None
    ) -> "StateRewind":
        """Squash only the newest record into the one before it."""

        outcome = squash_tail(self._records, self._index, compare, modify)
        self._apply(outcome, "squash_last")
        return self

    def on_change(self, callback: Optional[ChangeObserver]) -> "StateRewind":
        self._trace("on_change.registered", active=callback is not None)
        self._on_change = callback
        return self

    def set_default_forward_backward_callback(
        self, callback: Optional[DefaultHandler]
    ) -> "StateRewind":
        self._trace("default_callback.registered", active=callback is not None)
        self._default_callback = callback
        return self

    def load(
        self, changes: Iterable[Any], *, execute: bool = False
    ) -> "StateRewind":
        """Replay previously captured changes in order.

        Changes are appended after the active record exactly as repeated
        ``set`` calls would be; call ``clear()`` first to rebuild from
        scratch. Actions cannot be restored; with ``execute=True`` each change
        runs through the default forward/backward callback instead.
        """

        self._trace("load", execute=execute)
        record = self.execute if execute else self.set
        for change in changes:
            record(change)
        return self

    def snapshot(self) -> HistoryView:
        return HistoryView(
            revision=self._revision,
            changes=tuple(record.change for record in self._records),
            index=self._index,
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
        )

    def _apply(self, outcome: SquashOutcome, operation: str) -> None:
        self._trace(operation, merged=outcome.merged, index=outcome.index)
        self._records = outcome.records
        self._index = outcome.index
        self._notify()

    def _notify(self) -> None:
        self._revision += 1
        if self._on_change is not None:
            self._on_change()

    def _trace(self, event: str, **data: Any) -> None:
        if not self.options.log:
            return
        telemetry.record_event(
            f"history::{event}",
            level="info",
            data=data,
            logger_name=self.options.resolved_logger_name,
        )

    def _span(self, operation: str) -> ContextManager[object]:
        if not self.options.log:
            return nullcontext()
        return telemetry.span(
            f"history::{operation}",
            logger_name=self.options.resolved_logger_name,
            component="history",
            metadata={"size": len(self._records), "index": self._index},
        )


__all__ = ["HistoryView", "StateRewind"]
