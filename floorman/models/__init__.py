"""
Floorman Models.

- Article: per-floor quantity ledger of one production lot
- ArticleLog: immutable audit trail of ledger changes
"""

from floorman.models.enums import (
    ArticleStatus,
    LinkingType,
    LogAction,
    Priority,
    ProductionFloor,
    QualityGrade,
    RepairStatus,
)
from floorman.models.article import Article
from floorman.models.log import ArticleLog

__all__ = [
    'ArticleStatus',
    'LinkingType',
    'LogAction',
    'Priority',
    'ProductionFloor',
    'QualityGrade',
    'RepairStatus',
    'Article',
    'ArticleLog',
]
