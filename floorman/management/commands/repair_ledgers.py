"""
Management command to self-heal stored article ledgers.

Usage:
    python manage.py repair_ledgers
    python manage.py repair_ledgers --dry-run
    python manage.py repair_ledgers --article A-1001
"""

from django.core.management.base import BaseCommand, CommandError

from floorman import production
from floorman.models import Article


class Command(BaseCommand):
    """Run the consistency pass over stored articles."""

    help = 'Clamp invariant violations in stored article ledgers'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the corrections without saving them'
        )
        parser.add_argument(
            '--article',
            help='Only this article code'
        )

    def handle(self, *args, **options):
        articles = Article.objects.order_by('pk')
        if options['article']:
            articles = articles.filter(code=options['article'])
            if not articles.exists():
                raise CommandError(f"Article {options['article']!r} not found")

        corrected = 0
        for article in articles.iterator():
            report = production.check(article)
            if not report.changed:
                continue
            corrected += 1
            for note in report.corrections:
                self.stdout.write(f'{article.code}: {note}')
            if not options['dry_run']:
                production.repair(article, change_reason='repair_ledgers')

        if options['dry_run']:
            self.stdout.write(f'{corrected} article(s) would be corrected')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{corrected} article(s) corrected')
            )
