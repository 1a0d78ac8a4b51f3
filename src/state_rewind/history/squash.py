"""Collapse adjacent history records that a caller considers equivalent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from .records import ChangeRecord

Compare = Callable[[Any, Any], bool]
Modify = Callable[[Any, Any], Any]


@dataclass(frozen=True, slots=True)
class SquashOutcome:
    records: List[ChangeRecord]
    index: int
    merged: int


def _merge(
    previous: ChangeRecord, current: ChangeRecord, modify: Optional[Modify]
) -> ChangeRecord:
    change = current.change
    if modify is not None:
        change = modify(previous.change, current.change)
    # The later record's actions replace the earlier ones.
    return ChangeRecord(
        change=change, forward=current.forward, backward=current.backward
    )


def squash_records(
    records: Sequence[ChangeRecord],
    index: int,
    compare: Compare,
    modify: Optional[Modify] = None,
) -> SquashOutcome:
    """Merge every record into its predecessor when ``compare`` says so.

    Single left-to-right pass; a run of equivalent records folds into one.
    ``index`` is the cursor into ``records`` and is shifted down once for
    every merge at or before it, so it keeps pointing at the same logical
    entry. The input sequence is not modified.
    """

    output: List[ChangeRecord] = []
    merged = 0
    shifted = index
    for position, record in enumerate(records):
        if output and compare(output[-1].change, record.change):
            output[-1] = _merge(output[-1], record, modify)
            merged += 1
            if position <= index:
                shifted -= 1
            continue
        output.append(record)
    return SquashOutcome(records=output, index=shifted, merged=merged)


def squash_tail(
    records: Sequence[ChangeRecord],
    index: int,
    compare: Compare,
    modify: Optional[Modify] = None,
) -> SquashOutcome:
    """Apply the squash step to the final record only."""

    if len(records) < 2:
        return SquashOutcome(records=list(records), index=index, merged=0)

    head = list(records[:-1])
    last = records[-1]
    if not compare(head[-1].change, last.change):
        head.append(last)
        return SquashOutcome(records=head, index=index, merged=0)

    head[-1] = _merge(head[-1], last, modify)
    if len(records) - 1 <= index:
        index -= 1
    return SquashOutcome(records=head, index=index, merged=1)


__all__ = ["Compare", "Modify", "SquashOutcome", "squash_records", "squash_tail"]
