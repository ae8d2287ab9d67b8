"""
Tests for the repair_ledgers management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from floorman.models import Article


pytestmark = pytest.mark.django_db


def _corrupt(article):
    quantities = dict(article.floor_quantities)
    quantities['Washing'] = {'received': 10, 'completed': 25}
    Article.objects.filter(pk=article.pk).update(floor_quantities=quantities)


def _run(*args):
    out = StringIO()
    call_command('repair_ledgers', *args, stdout=out)
    return out.getvalue()


class TestRepairLedgersCommand:
    """Tests for manage.py repair_ledgers."""

    def test_dry_run_reports_without_saving(self, article, rosso_article):
        _corrupt(article)

        output = _run('--dry-run')

        assert 'A-1001: Washing: completed (25) exceeded received (10), clamped' in output
        assert '1 article(s) would be corrected' in output
        assert Article.objects.get(pk=article.pk).floor_quantities['Washing']['completed'] == 25

    def test_repairs_and_logs_reason(self, article):
        _corrupt(article)

        output = _run()

        stored = Article.objects.get(pk=article.pk)
        assert stored.floor_quantities['Washing']['completed'] == 10
        assert stored.version == 1
        assert '1 article(s) corrected' in output

    def test_clean_articles_are_skipped(self, article):
        output = _run()

        assert '0 article(s) corrected' in output
        assert Article.objects.get(pk=article.pk).version == 0

    def test_single_article(self, article, rosso_article):
        _corrupt(article)
        _corrupt(rosso_article)

        output = _run('--article', 'A-2001')

        assert 'A-2001' in output
        assert 'A-1001' not in output
        assert Article.objects.get(pk=article.pk).floor_quantities['Washing']['completed'] == 25

    def test_unknown_article(self, db):
        with pytest.raises(CommandError):
            _run('--article', 'NOPE')
