"""
Django Floorman — per-floor quantity ledger for garment production.

Usage:
    from floorman import production, FloorError

    article = production.create_article('A-1001', 'ART-77', 1000)
    production.complete(article, ProductionFloor.KNITTING, 1050)
    production.transfer(article, ProductionFloor.KNITTING)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'production':
        from floorman.service import Production
        return Production
    elif name in ('FloorError', 'ValidationError', 'NotFoundError', 'StateError',
                  'GradingIncompleteError', 'ConcurrencyError'):
        from floorman import exceptions
        return getattr(exceptions, name)
    elif name == 'Article':
        from floorman.models.article import Article
        return Article
    elif name == 'ArticleLog':
        from floorman.models.log import ArticleLog
        return ArticleLog
    elif name in ('ProductionFloor', 'LinkingType', 'ArticleStatus', 'RepairStatus',
                  'QualityGrade', 'LogAction', 'Priority'):
        from floorman.models import enums
        return getattr(enums, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'production',
    'FloorError',
    'ValidationError',
    'NotFoundError',
    'StateError',
    'GradingIncompleteError',
    'ConcurrencyError',
    'Article',
    'ArticleLog',
    'ProductionFloor',
    'LinkingType',
    'ArticleStatus',
    'RepairStatus',
    'QualityGrade',
    'LogAction',
    'Priority',
]

__version__ = '0.1.0'
