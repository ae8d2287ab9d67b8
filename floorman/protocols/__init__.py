"""
Floorman Protocols.

Defines interfaces for external system integration.
"""

from floorman.protocols.audit import AuditOutcome, AuditRecord, AuditSink
from floorman.protocols.catalog import ProcessCatalog, ProcessStep

__all__ = [
    "AuditOutcome",
    "AuditRecord",
    "AuditSink",
    "ProcessCatalog",
    "ProcessStep",
]
