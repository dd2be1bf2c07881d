"""When does a transaction occur?

Every occurrence is defined by ``_nth_occurrence``: slot k of a transaction
lies k steps after its anchor date. Fixed steps add whole days; calendar
steps move k * n months from the anchor and keep the anchor's day number,
so a slot whose month is too short for that day is skipped rather than
clamped (an anchor on Jan 31 fires in March but not in February).

``expand`` walks the slots forward and ``occurs_on`` checks the single slot
that could land on a date, so the two always agree.
"""
from datetime import MAXYEAR, date, timedelta
from typing import Iterator

from models.transaction import Transaction
from utils.constants import DAY_INTERVALS, MONTH_INTERVALS, RECURRENCE_NONE
from utils.date_helpers import days_in_month, month_distance, shift_month


def _nth_occurrence(tx: Transaction, k: int) -> date | None:
    """Date of slot k (k >= 0), or None when that slot is skipped.

    Raises OverflowError when the slot lies beyond the last representable date.
    """
    anchor = tx.date
    if tx.recurrence == RECURRENCE_NONE:
        return anchor if k == 0 else None
    if tx.recurrence in DAY_INTERVALS:
        return anchor + timedelta(days=k * DAY_INTERVALS[tx.recurrence])
    if tx.recurrence in MONTH_INTERVALS:
        year, month = shift_month(anchor.year, anchor.month, k * MONTH_INTERVALS[tx.recurrence])
        if year > MAXYEAR:
            raise OverflowError(f"slot {k} is past {date.max}")
        if anchor.day > days_in_month(year, month):
            return None
        return date(year, month, anchor.day)
    raise ValueError(f"Unknown recurrence: {tx.recurrence!r}")


def _first_slot_on_or_after(tx: Transaction, start: date) -> int:
    """Lowest slot index whose date could be >= start."""
    if start <= tx.date:
        return 0
    if tx.recurrence in DAY_INTERVALS:
        interval = DAY_INTERVALS[tx.recurrence]
        return -(-(start - tx.date).days // interval)
    if tx.recurrence in MONTH_INTERVALS:
        return month_distance(tx.date, start) // MONTH_INTERVALS[tx.recurrence]
    # one-time: the only slot is already behind start
    return 1


def iter_occurrences(tx: Transaction, start: date | None = None) -> Iterator[date]:
    """Lazily yield occurrence dates in increasing order, from start (or the anchor) on.

    Recurring transactions run until the last representable date, so callers
    normally stop on their own.
    """
    k = _first_slot_on_or_after(tx, start) if start else 0
    if tx.recurrence == RECURRENCE_NONE:
        if k == 0:
            yield tx.date
        return
    while True:
        try:
            d = _nth_occurrence(tx, k)
        except OverflowError:
            return
        if d is not None and (start is None or d >= start):
            yield d
        k += 1


def expand(tx: Transaction, target: date) -> list[date]:
    """Every occurrence from the anchor through target, inclusive."""
    return occurrences_between(tx, tx.date, target)


def occurrences_between(tx: Transaction, start: date, end: date) -> list[date]:
    """Occurrences falling within [start, end]."""
    result = []
    if start > end:
        return result
    for d in iter_occurrences(tx, start):
        if d > end:
            break
        result.append(d)
    return result


def occurs_on(tx: Transaction, target: date) -> bool:
    """True if target is one of the transaction's occurrence dates."""
    anchor = tx.date
    if target < anchor:
        return False
    if tx.recurrence == RECURRENCE_NONE:
        return target == anchor
    if tx.recurrence in DAY_INTERVALS:
        return _nth_occurrence(tx, (target - anchor).days // DAY_INTERVALS[tx.recurrence]) == target
    if tx.recurrence in MONTH_INTERVALS:
        step = MONTH_INTERVALS[tx.recurrence]
        distance = month_distance(anchor, target)
        if distance % step:
            return False
        return _nth_occurrence(tx, distance // step) == target
    raise ValueError(f"Unknown recurrence: {tx.recurrence!r}")
