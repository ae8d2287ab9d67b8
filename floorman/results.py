"""
Operation results returned by the Production facade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from floorman.protocols.audit import AuditOutcome, AuditRecord


@dataclass
class OperationResult:
    """
    Outcome of one ledger operation.

    Attributes:
        operation: Operation name ('transfer', 'record_grading', ...)
        data: Operation-specific values (moved quantity, next floor, ...)
        records: Audit records produced by the operation
        corrections: Notes from the consistency pass before persisting
        warnings: Non-fatal findings (e.g. grading/completion mismatch)
        audit: Delivery outcome per record; failures here never undo
            the operation
    """

    operation: str
    data: dict[str, Any] = field(default_factory=dict)
    records: list[AuditRecord] = field(default_factory=list)
    corrections: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    audit: list[AuditOutcome] = field(default_factory=list)

    @property
    def audit_failures(self) -> list[AuditOutcome]:
        return [outcome for outcome in self.audit if not outcome.delivered]


@dataclass
class EngineResult:
    """What an engine hands back to the facade."""

    data: dict[str, Any] = field(default_factory=dict)
    records: list[AuditRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    corrections: list[str] = field(default_factory=list)
