"""
Tests for the repair loop (RepairLoop).
"""

import pytest

from floorman.exceptions import StateError, ValidationError
from floorman.models import LogAction, ProductionFloor, RepairStatus
from floorman.services import RepairLoop


class TestRepairTransfer:
    """Tests for RepairLoop.repair_transfer()."""

    def test_defaults_to_previous_floor_and_all_m2(self, graded_snapshot):
        result = RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING)

        checking = graded_snapshot.entry(ProductionFloor.CHECKING)
        knitting = graded_snapshot.entry(ProductionFloor.KNITTING)
        assert result.data['to_floor'] == 'Knitting'
        assert result.data['quantity'] == 15
        assert checking.m2_quantity == 0
        assert checking.m2_transferred == 15
        assert checking.repair_status == RepairStatus.NOT_REQUIRED
        assert knitting.received == 1015
        assert knitting.repair_received == 15

    def test_categorized_is_unchanged(self, graded_snapshot):
        checking = graded_snapshot.entry(ProductionFloor.CHECKING)

        RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, 10)

        assert checking.categorized == 100
        assert checking.quality_total == 90

    def test_partial_repair_stays_in_review(self, graded_snapshot):
        result = RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, 5,
                                            remarks='loose cuffs')

        checking = graded_snapshot.entry(ProductionFloor.CHECKING)
        assert checking.m2_quantity == 10
        assert checking.repair_status == RepairStatus.IN_REVIEW
        assert checking.repair_remarks == 'loose cuffs'
        assert result.data['repair_status'] == 'In Review'

    def test_audit_record(self, graded_snapshot):
        result = RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, 5)

        record = result.records[0]
        assert record.action == LogAction.REPAIR_STARTED
        assert record.from_floor == 'Checking'
        assert record.to_floor == 'Knitting'
        assert record.quantity == 5
        assert (record.previous_value, record.new_value) == (15, 10)
        assert record.quality_status == 'M2 - Needs Repair'

    def test_explicit_earlier_target(self, graded_snapshot):
        final = graded_snapshot.entry(ProductionFloor.FINAL_CHECKING)
        final.received = 50
        final.completed = 50
        final.m1_quantity = 45
        final.m2_quantity = 5
        final.recompute_remaining()

        RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.FINAL_CHECKING, 5,
                                   target_floor=ProductionFloor.WASHING)

        washing = graded_snapshot.entry(ProductionFloor.WASHING)
        assert washing.received == 5
        assert washing.repair_received == 5
        assert washing.remaining == 5

    @pytest.mark.parametrize('target', [
        ProductionFloor.CHECKING,
        ProductionFloor.WASHING,
        ProductionFloor.LINKING,
        'Pressing',
    ])
    def test_rejects_targets_not_earlier_in_flow(self, graded_snapshot, target):
        before = graded_snapshot.ledger.to_dict()

        with pytest.raises(ValidationError) as exc:
            RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, 5,
                                       target_floor=target)

        assert exc.value.code == 'INVALID_TARGET_FLOOR'
        assert graded_snapshot.ledger.to_dict() == before

    def test_first_floor_source_has_no_target(self, make_snapshot):
        snapshot = make_snapshot(planned=100, sequence=[
            ProductionFloor.CHECKING, ProductionFloor.DISPATCH,
        ])

        with pytest.raises(StateError) as exc:
            RepairLoop.repair_transfer(snapshot, ProductionFloor.CHECKING, 1)
        assert exc.value.code == 'INVALID_TARGET_FLOOR'

    def test_source_must_grade_quality(self, snapshot):
        with pytest.raises(StateError) as exc:
            RepairLoop.repair_transfer(snapshot, ProductionFloor.WASHING, 1)
        assert exc.value.code == 'WRONG_FLOOR_KIND'

    def test_nothing_to_repair(self, snapshot):
        with pytest.raises(ValidationError) as exc:
            RepairLoop.repair_transfer(snapshot, ProductionFloor.CHECKING)
        assert exc.value.code == 'NOTHING_TO_TRANSFER'

    def test_quantity_above_m2(self, graded_snapshot):
        with pytest.raises(ValidationError) as exc:
            RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, 16)
        assert exc.value.code == 'QUANTITY_EXCEEDS_LIMIT'
        assert exc.value.available == 15

    @pytest.mark.parametrize('quantity', [0, -3])
    def test_non_positive_quantity(self, graded_snapshot, quantity):
        with pytest.raises(ValidationError) as exc:
            RepairLoop.repair_transfer(graded_snapshot, ProductionFloor.CHECKING, quantity)
        assert exc.value.code == 'INVALID_QUANTITY'
