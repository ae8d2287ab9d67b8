"""
Quality grading — the M1-M4 split at grading floors.
"""

from floorman.exceptions import StateError, ValidationError
from floorman.ledger import ArticleSnapshot, GradingEntry
from floorman.models.enums import LogAction, QualityGrade, RepairStatus
from floorman.protocols.audit import AuditRecord
from floorman.results import EngineResult
from floorman.services.guards import require_count, require_grading_floor, require_positive


APPROVED_TAG = 'Approved for Warehouse'
REJECTED_TAG = 'Rejected'


class QualityGrading:
    """Grading, M2 re-categorization and final quality confirmation."""

    @classmethod
    def record_grading(cls, snapshot: ArticleSnapshot, floor, m1: int = 0, m2: int = 0,
                       m3: int = 0, m4: int = 0, repair_status: str | None = None,
                       repair_remarks: str | None = None,
                       inspected_quantity: int | None = None,
                       remarks: str = '') -> EngineResult:
        """
        Write the M1-M4 split of a grading floor.

        With inspected_quantity the split must add up to exactly that
        many units (inspection variant); otherwise it may not exceed
        received.

        Raises:
            StateError('WRONG_FLOOR_KIND'): floor does not grade quality
            ValidationError('INVALID_QUANTITY'): negative counts, or M1
                below units already transferred
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): split above received
            ValidationError('INSPECTION_MISMATCH'): split differs from
                inspected_quantity
        """
        floor, entry = require_grading_floor(snapshot, floor)
        values = {
            QualityGrade.M1: require_count(m1, 'm1'),
            QualityGrade.M2: require_count(m2, 'm2'),
            QualityGrade.M3: require_count(m3, 'm3'),
            QualityGrade.M4: require_count(m4, 'm4'),
        }
        total = sum(values.values())

        if inspected_quantity is not None:
            inspected_quantity = require_count(inspected_quantity, 'inspected_quantity')
            if inspected_quantity > entry.received:
                raise ValidationError(
                    'QUANTITY_EXCEEDS_LIMIT',
                    floor=floor.value,
                    available=entry.received,
                    requested=inspected_quantity,
                )
            if total != inspected_quantity:
                raise ValidationError(
                    'INSPECTION_MISMATCH',
                    floor=floor.value,
                    inspected=inspected_quantity,
                    total=total,
                )
        if total > entry.received:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=entry.received,
                requested=total,
            )
        if values[QualityGrade.M1] < entry.m1_transferred:
            raise ValidationError(
                'INVALID_QUANTITY',
                'M1 cannot drop below units already transferred',
                floor=floor.value,
                available=entry.m1_transferred,
                requested=values[QualityGrade.M1],
            )
        if repair_status is not None:
            try:
                repair_status = RepairStatus(repair_status).value
            except ValueError:
                raise ValidationError(
                    'INVALID_REPAIR_STATUS', floor=floor.value, repair_status=repair_status,
                ) from None

        records = []
        for grade, value in values.items():
            previous = entry.grade(grade)
            if previous == value:
                continue
            entry.set_grade(grade, value)
            records.append(AuditRecord(
                action=LogAction.grade_updated(grade).value,
                quantity=value - previous,
                floor=floor.value,
                previous_value=previous,
                new_value=value,
                remarks=remarks,
                quality_status=grade.status_tag,
            ))

        if repair_status is not None:
            entry.repair_status = repair_status
        if repair_remarks is not None:
            entry.repair_remarks = repair_remarks
        entry.recompute_remaining()

        return EngineResult(
            data={
                'floor': floor.value,
                **cls._split(entry),
                'quality_total': entry.quality_total,
                'fully_graded': entry.categorized == entry.completed,
            },
            records=records,
        )

    @classmethod
    def shift_m2(cls, snapshot: ArticleSnapshot, floor, from_m2: int, to_m1: int = 0,
                 to_m3: int = 0, to_m4: int = 0, remarks: str = '') -> EngineResult:
        """
        Re-categorize repairable (M2) units after review.

        Raises:
            StateError('WRONG_FLOOR_KIND'): floor does not grade quality
            ValidationError('INVALID_QUANTITY'): from_m2 <= 0 or negative targets
            ValidationError('SHIFT_MISMATCH'): targets do not add up to from_m2
            ValidationError('QUANTITY_EXCEEDS_LIMIT'): from_m2 above current M2
        """
        floor, entry = require_grading_floor(snapshot, floor)
        from_m2 = require_positive(from_m2, 'from_m2')
        targets = {
            QualityGrade.M1: require_count(to_m1, 'to_m1'),
            QualityGrade.M3: require_count(to_m3, 'to_m3'),
            QualityGrade.M4: require_count(to_m4, 'to_m4'),
        }
        if sum(targets.values()) != from_m2:
            raise ValidationError(
                'SHIFT_MISMATCH',
                floor=floor.value,
                requested=from_m2,
                total=sum(targets.values()),
            )
        if from_m2 > entry.m2_quantity:
            raise ValidationError(
                'QUANTITY_EXCEEDS_LIMIT',
                floor=floor.value,
                available=entry.m2_quantity,
                requested=from_m2,
            )

        entry.m2_quantity -= from_m2
        records = []
        for grade, quantity in targets.items():
            if not quantity:
                continue
            previous = entry.grade(grade)
            entry.set_grade(grade, previous + quantity)
            records.append(AuditRecord(
                action=LogAction.m2_shifted_to(grade).value,
                quantity=quantity,
                floor=floor.value,
                previous_value=previous,
                new_value=previous + quantity,
                remarks=remarks,
                quality_status=grade.status_tag,
            ))
        entry.recompute_remaining()

        return EngineResult(
            data={'floor': floor.value, 'shifted': from_m2, **cls._split(entry)},
            records=records,
        )

    @classmethod
    def confirm_final_quality(cls, snapshot: ArticleSnapshot, confirmed: bool,
                              remarks: str = '', floor=None) -> EngineResult:
        """
        Approve (or reject) the article for the warehouse.

        Checks the last grading floor of the flow unless another
        grading floor is given.

        Raises:
            StateError('WRONG_FLOOR_KIND'): no grading floor in the flow,
                or the given floor does not grade quality
            StateError('NOT_CATEGORIZED'): confirming while completed
                units are not all graded
        """
        if floor is None:
            floor = snapshot.last_grading_floor
            if floor is None:
                raise StateError(
                    'WRONG_FLOOR_KIND',
                    'The flow has no grading floor',
                    sequence=[f.value for f in snapshot.sequence],
                )
        floor, entry = require_grading_floor(snapshot, floor)
        confirmed = bool(confirmed)

        if confirmed and entry.categorized != entry.completed:
            raise StateError(
                'NOT_CATEGORIZED',
                floor=floor.value,
                completed=entry.completed,
                categorized=entry.categorized,
            )

        previous = snapshot.final_quality_confirmed
        snapshot.final_quality_confirmed = confirmed

        record = AuditRecord(
            action=(LogAction.FINAL_QUALITY_CONFIRMED if confirmed
                    else LogAction.FINAL_QUALITY_REJECTED).value,
            quantity=entry.completed,
            floor=floor.value,
            previous_value=previous,
            new_value=confirmed,
            remarks=remarks,
            quality_status=APPROVED_TAG if confirmed else REJECTED_TAG,
        )
        return EngineResult(
            data={'floor': floor.value, 'confirmed': confirmed, **cls._split(entry)},
            records=[record],
        )

    @classmethod
    def _split(cls, entry: GradingEntry) -> dict[str, int]:
        return {
            'm1_quantity': entry.m1_quantity,
            'm2_quantity': entry.m2_quantity,
            'm3_quantity': entry.m3_quantity,
            'm4_quantity': entry.m4_quantity,
        }
