"""
End-to-end production scenarios through the Production facade.
"""

import pytest

from floorman import production
from floorman.exceptions import ValidationError
from floorman.models import Article, ArticleLog, ArticleStatus, LogAction, ProductionFloor


pytestmark = pytest.mark.django_db


def _floor(article, floor):
    return Article.objects.get(pk=article.pk).floor_quantities[floor.value]


class TestAutoLinkingRun:
    """1000 planned, auto linking: knit, check, grade, move M1 on."""

    def test_m1_moves_forward_exactly(self, article):
        production.complete(article, ProductionFloor.KNITTING, 750)
        production.transfer(article, ProductionFloor.KNITTING, 750)
        production.complete(article, ProductionFloor.CHECKING, 100)
        production.record_grading(article, ProductionFloor.CHECKING, 80, 15, 3, 2)

        result = production.transfer(article, ProductionFloor.CHECKING)

        checking = _floor(article, ProductionFloor.CHECKING)
        assert result.data['quantity'] == 80
        assert checking['m1_transferred'] == 80
        assert checking['m1_remaining'] == 0
        assert _floor(article, ProductionFloor.WASHING)['received'] == 80
        assert result.corrections == []

    def test_audit_trail(self, article):
        production.complete(article, ProductionFloor.KNITTING, 750)
        production.transfer(article, ProductionFloor.KNITTING, 750)

        actions = list(
            ArticleLog.objects.filter(article=article).values_list('action', flat=True)
        )
        assert actions == [
            LogAction.ARTICLE_ADDED,
            LogAction.QUANTITY_UPDATED,
            LogAction.TRANSFERRED_TO_CHECKING,
        ]


class TestOverproduction:
    """Knitting completes more than planned and sends all of it on."""

    def test_full_overproduction_reaches_next_floor(self, article):
        production.complete(article, ProductionFloor.KNITTING, 1050)

        assert _floor(article, ProductionFloor.KNITTING)['remaining'] == 0

        production.transfer(article, ProductionFloor.KNITTING, 1050)

        assert _floor(article, ProductionFloor.CHECKING)['received'] == 1050
        assert article.planned_quantity == 1000


class TestRepairLoopRun:
    """Rosso flow: repair from Checking back to Knitting, skipping Linking."""

    @pytest.fixture
    def checked(self, rosso_article):
        production.complete(rosso_article, ProductionFloor.KNITTING, 100)
        production.transfer(rosso_article, ProductionFloor.KNITTING)
        production.complete(rosso_article, ProductionFloor.LINKING, 100)
        production.transfer(rosso_article, ProductionFloor.LINKING)
        production.complete(rosso_article, ProductionFloor.CHECKING, 100)
        production.record_grading(rosso_article, ProductionFloor.CHECKING, 80, 15, 3, 2)
        return rosso_article

    def test_repair_two_floors_back(self, checked):
        production.repair_transfer(checked, ProductionFloor.CHECKING, 5,
                                   target_floor=ProductionFloor.KNITTING)

        checking = _floor(checked, ProductionFloor.CHECKING)
        knitting = _floor(checked, ProductionFloor.KNITTING)
        assert checking['m2_quantity'] == 10
        assert checking['repair_status'] == 'In Review'
        assert knitting['received'] == 105
        assert knitting['repair_received'] == 5
        assert _floor(checked, ProductionFloor.LINKING)['received'] == 100

    @pytest.mark.parametrize('target', [ProductionFloor.CHECKING, ProductionFloor.WASHING])
    def test_target_at_or_after_source(self, checked, target):
        before = Article.objects.get(pk=checked.pk)

        with pytest.raises(ValidationError):
            production.repair_transfer(checked, ProductionFloor.CHECKING, 5, target_floor=target)

        after = Article.objects.get(pk=checked.pk)
        assert after.floor_quantities == before.floor_quantities
        assert after.version == before.version

    def test_repaired_units_flow_again(self, checked):
        production.repair_transfer(checked, ProductionFloor.CHECKING, 15)
        production.complete(checked, ProductionFloor.LINKING, 115)
        production.transfer(checked, ProductionFloor.LINKING, 15)

        checking = _floor(checked, ProductionFloor.CHECKING)
        assert checking['received'] == 115
        assert checking['m2_transferred'] == 15


class TestOverTransfer:
    """Moving more M1 units than were graded M1."""

    def test_rejected_without_changes(self, article):
        production.complete(article, ProductionFloor.KNITTING, 750)
        production.transfer(article, ProductionFloor.KNITTING, 750)
        production.complete(article, ProductionFloor.CHECKING, 100)
        production.record_grading(article, ProductionFloor.CHECKING, 80, 15, 3, 2)
        before = Article.objects.get(pk=article.pk)

        with pytest.raises(ValidationError) as exc:
            production.transfer(article, ProductionFloor.CHECKING, 90)

        assert exc.value.code == 'QUANTITY_EXCEEDS_LIMIT'
        after = Article.objects.get(pk=article.pk)
        assert after.floor_quantities == before.floor_quantities
        assert after.version == before.version


class TestFinishing:
    """Short flow from knitting to dispatch with final approval."""

    def test_article_completes(self, db, catalog):
        catalog.add('ART-5', ['Knitting', 'Final Checking', 'Dispatch'])
        article = production.create_article('A-5', 'ART-5', 10)

        production.complete(article, ProductionFloor.KNITTING, 10)
        production.transfer(article, ProductionFloor.KNITTING)
        production.complete(article, ProductionFloor.FINAL_CHECKING, 10)
        production.record_grading(article, ProductionFloor.FINAL_CHECKING, 10)
        production.confirm_final_quality(article, remarks='passed')
        production.transfer(article, ProductionFloor.FINAL_CHECKING)
        production.complete(article, ProductionFloor.DISPATCH, 10)

        article.refresh_from_db()
        assert article.final_quality_confirmed is True
        assert article.status == ArticleStatus.COMPLETED
        assert article.progress == 100
        assert article.completed_at is not None
