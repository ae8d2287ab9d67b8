"""
Pytest fixtures for Floorman tests.
"""

import pytest

from floorman import production
from floorman.adapters import (
    MemoryAuditSink,
    StaticProcessCatalog,
    reset_audit_sink,
    reset_process_catalog,
)
from floorman.ledger import ArticleSnapshot
from floorman.models import LinkingType, ProductionFloor


AUTO_FLOW = [
    ProductionFloor.KNITTING,
    ProductionFloor.CHECKING,
    ProductionFloor.WASHING,
    ProductionFloor.BOARDING,
    ProductionFloor.SILICON,
    ProductionFloor.SECONDARY_CHECKING,
    ProductionFloor.BRANDING,
    ProductionFloor.FINAL_CHECKING,
    ProductionFloor.WAREHOUSE,
    ProductionFloor.DISPATCH,
]

FULL_FLOW = list(ProductionFloor)


@pytest.fixture(autouse=True)
def reset_adapters():
    """Drop cached adapters so each test sees its own settings."""
    reset_process_catalog()
    reset_audit_sink()
    yield
    reset_process_catalog()
    reset_audit_sink()


@pytest.fixture
def catalog(monkeypatch):
    """In-memory process catalog used by the resolver."""
    static = StaticProcessCatalog()
    monkeypatch.setattr('floorman.adapters.catalog._process_catalog', static)
    return static


@pytest.fixture
def memory_sink(monkeypatch):
    """In-memory audit sink replacing ArticleLogSink."""
    sink = MemoryAuditSink()
    monkeypatch.setattr('floorman.adapters.audit._audit_sink', sink)
    return sink


@pytest.fixture
def make_snapshot():
    """Factory for in-memory snapshots (no database)."""
    def _make(planned=1000, sequence=None, linking_type=LinkingType.AUTO_LINKING):
        return ArticleSnapshot.seed(
            article_number='ART-1',
            planned_quantity=planned,
            sequence=AUTO_FLOW if sequence is None else sequence,
            linking_type=linking_type.value,
        )
    return _make


@pytest.fixture
def snapshot(make_snapshot):
    """Auto-linking snapshot, 1000 planned, Knitting received 1000."""
    return make_snapshot()


@pytest.fixture
def graded_snapshot(snapshot):
    """
    Knitting finished 750 and sent them on; Checking completed 100
    graded 80/15/3/2.
    """
    knitting = snapshot.entry(ProductionFloor.KNITTING)
    knitting.completed = 750
    knitting.transferred = 750
    knitting.recompute_remaining()

    checking = snapshot.entry(ProductionFloor.CHECKING)
    checking.received = 750
    checking.completed = 100
    checking.m1_quantity = 80
    checking.m2_quantity = 15
    checking.m3_quantity = 3
    checking.m4_quantity = 2
    checking.recompute_remaining()
    return snapshot


@pytest.fixture
def article(db):
    """Auto-linking article, 1000 planned, stored."""
    return production.create_article(
        'A-1001', 'ART-1', 1000, linking_type=LinkingType.AUTO_LINKING, order_id='ORD-1',
    )


@pytest.fixture
def rosso_article(db):
    """Rosso-linking article (Linking floor included), 100 planned."""
    return production.create_article(
        'A-2001', 'ART-2', 100, linking_type=LinkingType.ROSSO_LINKING, order_id='ORD-2',
    )
