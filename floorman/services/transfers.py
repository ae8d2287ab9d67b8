"""
Forward transfers — moving finished units to the next floor of the flow.
"""

from floorman.exceptions import GradingIncompleteError, StateError, ValidationError
from floorman.floors import allows_overproduction
from floorman.ledger import ArticleSnapshot, GradingEntry
from floorman.models.enums import LogAction, QualityGrade
from floorman.protocols.audit import AuditRecord
from floorman.results import EngineResult
from floorman.services.guards import require_positive


class FloorTransfers:
    """Forward transfer rules, one per floor kind."""

    @classmethod
    def transferable(cls, snapshot: ArticleSnapshot, floor) -> int:
        """How many units the floor can send forward right now."""
        floor = snapshot.require_in_flow(floor)
        entry = snapshot.entry(floor)
        if isinstance(entry, GradingEntry):
            return entry.m1_remaining
        return max(0, entry.completed - entry.transferred)

    @classmethod
    def transfer(cls, snapshot: ArticleSnapshot, from_floor, quantity: int | None = None,
                 batch_number: str = '', remarks: str = '') -> EngineResult:
        """
        Move units from a floor to the next floor of the flow.

        Ceiling per floor kind:
        - grading floors: m1_remaining, and only once every completed
          unit has been graded
        - every other floor: completed units not yet transferred

        When quantity is None the whole ceiling is moved.

        Raises:
            StateError('FLOOR_NOT_IN_FLOW'): floor is not in the sequence
            StateError('TERMINAL_FLOOR'): floor is the last of the flow
            GradingIncompleteError: grading floor with ungraded units
            ValidationError('NOTHING_TO_TRANSFER'): ceiling is zero
            ValidationError('INVALID_QUANTITY'): quantity <= 0
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): quantity above ceiling
        """
        floor = snapshot.require_in_flow(from_floor)
        next_floor = snapshot.next_floor(floor)
        if next_floor is None:
            raise StateError('TERMINAL_FLOOR', floor=floor.value)

        source = snapshot.entry(floor)
        target = snapshot.entry(next_floor)

        if isinstance(source, GradingEntry) and source.completed and source.categorized != source.completed:
            raise GradingIncompleteError(
                floor=floor.value,
                completed=source.completed,
                categorized=source.categorized,
            )

        ceiling = cls.transferable(snapshot, floor)
        if quantity is None:
            if ceiling == 0:
                raise ValidationError('NOTHING_TO_TRANSFER', floor=floor.value, available=0)
            quantity = ceiling
        quantity = require_positive(quantity)
        if quantity > ceiling:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=ceiling,
                requested=quantity,
            )

        if isinstance(source, GradingEntry):
            cls._move_graded(source, quantity)
            target.received += quantity
        elif allows_overproduction(floor, snapshot.sequence):
            source.transferred += quantity
            source.recompute_remaining()
            # Everything the first floor has sent, overproduction included
            target.received = source.transferred + target.repair_received
        else:
            source.transferred += quantity
            source.recompute_remaining()
            target.received += quantity
        target.recompute_remaining()

        record = AuditRecord(
            action=LogAction.transferred_to(next_floor).value,
            quantity=quantity,
            floor=floor.value,
            from_floor=floor.value,
            to_floor=next_floor.value,
            previous_value=source.transferred - quantity,
            new_value=source.transferred,
            remarks=' | '.join(part for part in (remarks, cls._breakdown(source)) if part),
            quality_status=QualityGrade.M1.status_tag if isinstance(source, GradingEntry) else '',
            batch_number=batch_number or '',
        )
        return EngineResult(
            data={
                'from_floor': floor.value,
                'to_floor': next_floor.value,
                'quantity': quantity,
                'source_remaining': source.remaining,
                'target_received': target.received,
            },
            records=[record],
        )

    @classmethod
    def _move_graded(cls, entry: GradingEntry, quantity: int) -> None:
        entry.m1_transferred += quantity
        entry.transferred += quantity
        entry.recompute_remaining()
        # Defects were never transferable, so everything moved counts as completed
        if entry.completed < entry.transferred:
            entry.completed = entry.transferred

    @classmethod
    def _breakdown(cls, entry) -> str:
        if not isinstance(entry, GradingEntry):
            return ''
        return (
            f"M1: {entry.m1_quantity}, M2: {entry.m2_quantity}, "
            f"M3: {entry.m3_quantity}, M4: {entry.m4_quantity}"
        )
