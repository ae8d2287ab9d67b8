"""
Tests for completion recording (LedgerCompletion).
"""

import pytest

from floorman.exceptions import StateError, ValidationError
from floorman.models import LogAction, ProductionFloor
from floorman.services import FloorTransfers, LedgerCompletion


class TestComplete:
    """Tests for LedgerCompletion.complete()."""

    def test_first_floor_accepts_overproduction(self, snapshot):
        result = LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, 1050)

        knitting = snapshot.entry(ProductionFloor.KNITTING)
        assert knitting.completed == 1050
        assert knitting.remaining == 0
        assert result.data['overproduction'] == 50

    def test_other_floor_capped_by_received(self, snapshot):
        snapshot.entry(ProductionFloor.WASHING).received = 80

        with pytest.raises(ValidationError) as exc:
            LedgerCompletion.complete(snapshot, ProductionFloor.WASHING, 81)

        assert exc.value.code == 'QUANTITY_EXCEEDS_LIMIT'
        assert exc.value.available == 80
        assert exc.value.requested == 81
        assert snapshot.entry(ProductionFloor.WASHING).completed == 0

    def test_grading_floor_capped_by_received(self, snapshot):
        snapshot.entry(ProductionFloor.CHECKING).received = 100

        with pytest.raises(ValidationError):
            LedgerCompletion.complete(snapshot, ProductionFloor.CHECKING, 101)

    def test_grading_first_floor_is_still_capped(self, make_snapshot):
        snapshot = make_snapshot(planned=100, sequence=[
            ProductionFloor.CHECKING, ProductionFloor.DISPATCH,
        ])

        with pytest.raises(ValidationError):
            LedgerCompletion.complete(snapshot, ProductionFloor.CHECKING, 120)

    def test_recomputes_remaining(self, snapshot):
        snapshot.entry(ProductionFloor.WASHING).received = 80

        LedgerCompletion.complete(snapshot, ProductionFloor.WASHING, 60)

        assert snapshot.entry(ProductionFloor.WASHING).remaining == 20

    @pytest.mark.parametrize('quantity', [-1, 2.5, '10', True, None])
    def test_rejects_invalid_quantity(self, snapshot, quantity):
        with pytest.raises(ValidationError) as exc:
            LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, quantity)
        assert exc.value.code == 'INVALID_QUANTITY'

    def test_rejects_floor_outside_flow(self, snapshot):
        with pytest.raises(StateError) as exc:
            LedgerCompletion.complete(snapshot, ProductionFloor.LINKING, 10)
        assert exc.value.code == 'FLOOR_NOT_IN_FLOW'

    def test_below_transferred_is_a_warning(self, snapshot):
        knitting = snapshot.entry(ProductionFloor.KNITTING)
        knitting.completed = 500
        knitting.transferred = 400

        result = LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, 300)

        assert knitting.completed == 300
        assert knitting.remaining == knitting.received - 300
        assert result.data['completed'] == 300
        assert len(result.warnings) == 1
        assert 'below transferred 400' in result.warnings[0]

    def test_grading_floor_below_transferred_is_a_warning(self, graded_snapshot):
        FloorTransfers.transfer(graded_snapshot, ProductionFloor.CHECKING, 80)

        result = LedgerCompletion.complete(graded_snapshot, ProductionFloor.CHECKING, 50)

        assert graded_snapshot.entry(ProductionFloor.CHECKING).completed == 50
        assert any('below transferred 80' in w for w in result.warnings)

    def test_grading_mismatch_is_a_warning(self, graded_snapshot):
        result = LedgerCompletion.complete(graded_snapshot, ProductionFloor.CHECKING, 90)

        assert graded_snapshot.entry(ProductionFloor.CHECKING).completed == 90
        assert len(result.warnings) == 1
        assert 'graded total 100' in result.warnings[0]

    def test_grading_match_has_no_warning(self, graded_snapshot):
        result = LedgerCompletion.complete(graded_snapshot, ProductionFloor.CHECKING, 100)

        assert result.warnings == []

    def test_audit_record_carries_delta(self, snapshot):
        LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, 750)

        result = LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, 800, remarks='shift B')

        record = result.records[0]
        assert record.action == LogAction.QUANTITY_UPDATED
        assert record.quantity == 50
        assert record.previous_value == 750
        assert record.new_value == 800
        assert record.floor == 'Knitting'
        assert record.remarks == 'shift B'


class TestKnittingDefects:
    """Tests for LedgerCompletion.record_knitting_defects()."""

    def test_records_m4_within_completed(self, snapshot):
        snapshot.entry(ProductionFloor.KNITTING).completed = 100

        result = LedgerCompletion.record_knitting_defects(snapshot, 7)

        assert snapshot.entry(ProductionFloor.KNITTING).m4_quantity == 7
        assert result.data['good_quantity'] == 93
        assert result.records[0].action == LogAction.M4_QUANTITY_UPDATED
        assert result.records[0].quality_status == 'M4 - Major Defects'

    def test_rejects_m4_above_completed(self, snapshot):
        snapshot.entry(ProductionFloor.KNITTING).completed = 5

        with pytest.raises(ValidationError) as exc:
            LedgerCompletion.record_knitting_defects(snapshot, 6)
        assert exc.value.code == 'QUANTITY_EXCEEDS_LIMIT'

    def test_unchanged_value_produces_no_record(self, snapshot):
        snapshot.entry(ProductionFloor.KNITTING).completed = 100
        LedgerCompletion.record_knitting_defects(snapshot, 4)

        result = LedgerCompletion.record_knitting_defects(snapshot, 4)

        assert result.records == []

    def test_completion_cannot_drop_below_defects(self, snapshot):
        knitting = snapshot.entry(ProductionFloor.KNITTING)
        knitting.completed = 100
        knitting.m4_quantity = 10

        with pytest.raises(ValidationError):
            LedgerCompletion.complete(snapshot, ProductionFloor.KNITTING, 9)

    def test_requires_knitting_in_flow(self, make_snapshot):
        snapshot = make_snapshot(sequence=[ProductionFloor.LINKING, ProductionFloor.DISPATCH])

        with pytest.raises(StateError):
            LedgerCompletion.record_knitting_defects(snapshot, 0)
