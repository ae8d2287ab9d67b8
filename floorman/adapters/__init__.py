"""
Floorman Adapters.

Implementations of protocols for external systems.
"""

from floorman.adapters.audit import (
    ArticleLogSink,
    MemoryAuditSink,
    emit,
    get_audit_sink,
    reset_audit_sink,
)
from floorman.adapters.catalog import (
    StaticProcessCatalog,
    get_process_catalog,
    reset_process_catalog,
)
from floorman.adapters.noop import NoopProcessCatalog

__all__ = [
    "ArticleLogSink",
    "MemoryAuditSink",
    "emit",
    "get_audit_sink",
    "reset_audit_sink",
    "NoopProcessCatalog",
    "StaticProcessCatalog",
    "get_process_catalog",
    "reset_process_catalog",
]
