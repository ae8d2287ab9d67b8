"""
Completion recording — how many units a floor has finished.
"""

from floorman.exceptions import ValidationError
from floorman.floors import allows_overproduction
from floorman.ledger import ArticleSnapshot, GradingEntry, KnittingEntry
from floorman.models.enums import LogAction, ProductionFloor, QualityGrade
from floorman.protocols.audit import AuditRecord
from floorman.results import EngineResult
from floorman.services.guards import require_count


class LedgerCompletion:
    """Completed-quantity updates on a snapshot."""

    @classmethod
    def complete(cls, snapshot: ArticleSnapshot, floor, quantity: int,
                 remarks: str = '') -> EngineResult:
        """
        Set a floor's completed quantity.

        The first floor of the flow may complete more than it received
        (overproduction). Grading floors and every other floor accept
        0..received. A value below what was already transferred, or a
        quality split that does not add up to it, is reported as a
        warning. At knitting it may not drop below the recorded defects.

        Raises:
            StateError('FLOOR_NOT_IN_FLOW'): floor is not in the sequence
            ValidationError('INVALID_QUANTITY'): negative, not whole, or
                below knitting defects
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): above received
        """
        floor = snapshot.require_in_flow(floor)
        quantity = require_count(quantity)
        entry = snapshot.entry(floor)

        if not allows_overproduction(floor, snapshot.sequence) and quantity > entry.received:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=entry.received,
                requested=quantity,
            )
        if isinstance(entry, KnittingEntry) and quantity < entry.m4_quantity:
            raise ValidationError(
                'INVALID_QUANTITY',
                'Completed quantity cannot be lower than the recorded defects',
                floor=floor.value,
                available=entry.m4_quantity,
                requested=quantity,
            )

        warnings = []
        if quantity < entry.transferred:
            warnings.append(
                f"{floor.value}: completed {quantity} is below "
                f"transferred {entry.transferred}"
            )
        if isinstance(entry, GradingEntry) and entry.categorized and entry.categorized != quantity:
            warnings.append(
                f"{floor.value}: completed {quantity} does not match "
                f"graded total {entry.categorized}"
            )

        previous = entry.completed
        entry.completed = quantity
        entry.recompute_remaining()

        record = AuditRecord(
            action=LogAction.QUANTITY_UPDATED.value,
            quantity=quantity - previous,
            floor=floor.value,
            previous_value=previous,
            new_value=quantity,
            remarks=remarks,
        )
        return EngineResult(
            data={
                'floor': floor.value,
                'previous': previous,
                'completed': quantity,
                'remaining': entry.remaining,
                'overproduction': max(0, quantity - entry.received),
            },
            records=[record],
            warnings=warnings,
        )

    @classmethod
    def record_knitting_defects(cls, snapshot: ArticleSnapshot, m4_quantity: int,
                                remarks: str = '') -> EngineResult:
        """
        Record defective (M4) units found at knitting.

        Raises:
            StateError('FLOOR_NOT_IN_FLOW'): Knitting is not in the sequence
            ValidationError('INVALID_QUANTITY'): negative or not whole
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): above completed
        """
        floor = snapshot.require_in_flow(ProductionFloor.KNITTING)
        m4_quantity = require_count(m4_quantity, 'm4_quantity')
        entry: KnittingEntry = snapshot.entry(floor)

        if m4_quantity > entry.completed:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=entry.completed,
                requested=m4_quantity,
            )

        previous = entry.m4_quantity
        entry.m4_quantity = m4_quantity

        records = []
        if previous != m4_quantity:
            records.append(AuditRecord(
                action=LogAction.M4_QUANTITY_UPDATED.value,
                quantity=m4_quantity - previous,
                floor=floor.value,
                previous_value=previous,
                new_value=m4_quantity,
                remarks=remarks,
                quality_status=QualityGrade.M4.status_tag,
            ))
        return EngineResult(
            data={
                'floor': floor.value,
                'm4_quantity': m4_quantity,
                'good_quantity': entry.good_quantity,
            },
            records=records,
        )
