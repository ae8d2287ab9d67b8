"""
Repair loop — sending repairable (M2) units back to an earlier floor.
"""

from floorman.exceptions import StateError, ValidationError
from floorman.floors import as_floor
from floorman.ledger import ArticleSnapshot
from floorman.models.enums import LogAction, QualityGrade, RepairStatus
from floorman.protocols.audit import AuditRecord
from floorman.results import EngineResult
from floorman.services.guards import require_grading_floor, require_positive


class RepairLoop:
    """Backward transfers outside the normal forward flow."""

    @classmethod
    def repair_transfer(cls, snapshot: ArticleSnapshot, from_floor, quantity: int | None = None,
                        target_floor=None, remarks: str | None = None) -> EngineResult:
        """
        Send M2 units from a grading floor back for rework.

        The target defaults to the floor right before the source and may
        be any floor strictly earlier in the flow. Units arriving this way
        are counted in the target's repair_received as well as received.

        Raises:
            StateError('WRONG_FLOOR_KIND'): source does not grade quality
            StateError('FLOOR_NOT_IN_FLOW'): source is not in the sequence
            StateError('INVALID_TARGET_FLOOR'): source is the first floor
            ValidationError('INVALID_TARGET_FLOOR'): target is not earlier
                than the source in the flow
            ValidationError('NOTHING_TO_TRANSFER'): no M2 units
            ValidationError('INVALID_QUANTITY'): quantity <= 0
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): quantity above M2
        """
        floor, source = require_grading_floor(snapshot, from_floor)
        position = snapshot.index(floor)
        if position == 0:
            raise StateError(
                'INVALID_TARGET_FLOOR',
                'The first floor of the flow has nowhere to send repairs',
                floor=floor.value,
            )

        target_floor = cls._resolve_target(snapshot, floor, position, target_floor)

        if quantity is None:
            if source.m2_quantity == 0:
                raise ValidationError('NOTHING_TO_TRANSFER', floor=floor.value, available=0)
            quantity = source.m2_quantity
        quantity = require_positive(quantity)
        if quantity > source.m2_quantity:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=source.m2_quantity,
                requested=quantity,
            )

        previous_m2 = source.m2_quantity
        source.m2_quantity -= quantity
        source.m2_transferred += quantity
        source.recompute_remaining()
        source.repair_status = (
            RepairStatus.IN_REVIEW if source.m2_quantity > 0 else RepairStatus.NOT_REQUIRED
        ).value
        if remarks is not None:
            source.repair_remarks = remarks

        target = snapshot.entry(target_floor)
        target.received += quantity
        target.repair_received += quantity
        target.recompute_remaining()

        record = AuditRecord(
            action=LogAction.REPAIR_STARTED.value,
            quantity=quantity,
            floor=floor.value,
            from_floor=floor.value,
            to_floor=target_floor.value,
            previous_value=previous_m2,
            new_value=source.m2_quantity,
            remarks=remarks or '',
            quality_status=QualityGrade.M2.status_tag,
        )
        return EngineResult(
            data={
                'from_floor': floor.value,
                'to_floor': target_floor.value,
                'quantity': quantity,
                'm2_quantity': source.m2_quantity,
                'repair_status': source.repair_status,
            },
            records=[record],
        )

    @classmethod
    def _resolve_target(cls, snapshot, floor, position, target_floor):
        if target_floor is None:
            return snapshot.sequence[position - 1]
        try:
            target_floor = as_floor(target_floor)
        except ValueError:
            raise ValidationError('INVALID_TARGET_FLOOR', target=str(target_floor)) from None
        if target_floor not in snapshot.sequence or snapshot.sequence.index(target_floor) >= position:
            raise ValidationError(
                'INVALID_TARGET_FLOOR',
                floor=floor.value,
                target=target_floor.value,
            )
        return target_floor
