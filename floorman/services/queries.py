"""
Floor status queries — read-only views of a snapshot.
"""

from typing import Any

from floorman.ledger import ArticleSnapshot, GradingEntry, KnittingEntry
from floorman.progress import completion_rate


class FloorQueries:
    """Read-only floor status views."""

    @classmethod
    def floor_status(cls, snapshot: ArticleSnapshot, floor) -> dict[str, Any]:
        """
        Every counter of one floor plus its completion rate.

        Knitting adds good_quantity (completed minus m4); grading
        floors add quality_total and whether all output is graded.

        Raises:
            StateError('FLOOR_NOT_IN_FLOW'): floor is not in the sequence
        """
        floor = snapshot.require_in_flow(floor)
        entry = snapshot.entry(floor)
        status = {
            'floor': floor.value,
            'kind': entry.kind,
            **entry.to_dict(),
            'completion_rate': completion_rate(entry),
        }
        if isinstance(entry, KnittingEntry):
            status['good_quantity'] = entry.good_quantity
        if isinstance(entry, GradingEntry):
            status['quality_total'] = entry.quality_total
            status['fully_graded'] = entry.categorized == entry.completed
        return status

    @classmethod
    def floor_statuses(cls, snapshot: ArticleSnapshot) -> list[dict[str, Any]]:
        """Floor status of every floor in the flow, in flow order."""
        return [cls.floor_status(snapshot, floor) for floor in snapshot.sequence]
