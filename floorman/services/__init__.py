"""
Floorman services — the ledger engines.

Each engine works on an in-memory ArticleSnapshot, validates before
mutating, and returns an EngineResult. Persistence is the facade's job:
    from floorman.services import FloorTransfers, QualityGrading, RepairLoop
"""

from floorman.services.completion import LedgerCompletion
from floorman.services.quality import QualityGrading
from floorman.services.queries import FloorQueries
from floorman.services.repairs import RepairLoop
from floorman.services.transfers import FloorTransfers

__all__ = [
    'LedgerCompletion',
    'FloorTransfers',
    'QualityGrading',
    'RepairLoop',
    'FloorQueries',
]
