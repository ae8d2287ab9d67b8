"""
Progress and status derivation.
"""

from __future__ import annotations

from floorman.floors import is_grading
from floorman.ledger import ArticleSnapshot, GradingEntry
from floorman.models.enums import ArticleStatus


# Statuses only ever set from outside the ledger
EXTERNAL_STATUSES = frozenset({ArticleStatus.ON_HOLD, ArticleStatus.CANCELLED})


def active_floor(snapshot: ArticleSnapshot):
    """Last floor of the flow with completed units; the first floor if none."""
    for floor in reversed(snapshot.sequence):
        if snapshot.entry(floor).completed > 0:
            return floor
    return snapshot.first_floor


def calculate_progress(snapshot: ArticleSnapshot) -> int:
    """
    Overall completion percentage, 0-100.

    Sums, up to and including the active floor, M1 units at grading
    floors and completed units elsewhere, over the planned quantity.
    Halves round up.
    """
    planned = snapshot.planned_quantity
    if planned <= 0 or not snapshot.sequence:
        return 0

    active = active_floor(snapshot)
    total = 0
    for floor in snapshot.sequence:
        entry = snapshot.entry(floor)
        total += entry.m1_quantity if is_grading(floor) else entry.completed
        if floor == active:
            break

    percent = (total * 200 + planned) // (2 * planned)
    return max(0, min(100, percent))


def has_started(snapshot: ArticleSnapshot) -> bool:
    for floor in snapshot.sequence:
        entry = snapshot.entry(floor)
        if entry.completed > 0:
            return True
        if isinstance(entry, GradingEntry) and entry.categorized > 0:
            return True
    return False


def is_finished(snapshot: ArticleSnapshot) -> bool:
    """Terminal floor received units and completed all of them."""
    if not snapshot.sequence:
        return False
    entry = snapshot.entry(snapshot.last_floor)
    return entry.received > 0 and entry.completed >= entry.received


def derive_status(snapshot: ArticleSnapshot) -> str:
    """
    Lifecycle status implied by the ledger.

    Pending -> In Progress on the first recorded work, -> Completed
    when the terminal floor is done. On Hold and Cancelled are kept.
    """
    current = ArticleStatus(snapshot.status)
    if current in EXTERNAL_STATUSES:
        return current.value
    if is_finished(snapshot):
        return ArticleStatus.COMPLETED.value
    if has_started(snapshot):
        return ArticleStatus.IN_PROGRESS.value
    return ArticleStatus.PENDING.value


def completion_rate(entry) -> int:
    """round(completed / received * 100), 0 when nothing was received."""
    if entry.received <= 0:
        return 0
    return (entry.completed * 200 + entry.received) // (2 * entry.received)

