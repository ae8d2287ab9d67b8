"""
Audit Sink Protocol — Append-only trail of ledger mutations.

Engines produce AuditRecord values; the facade hands them to the
configured sink after the mutation is committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from django.utils import timezone


@dataclass(frozen=True)
class AuditRecord:
    """Immutable description of one ledger change."""

    action: str
    quantity: int = 0  # Delta for counter updates, moved units for transfers
    floor: str | None = None
    from_floor: str | None = None
    to_floor: str | None = None
    previous_value: Any = None
    new_value: Any = None
    remarks: str = ''
    change_reason: str = ''
    quality_status: str = ''
    batch_number: str = ''
    user_id: str = ''
    floor_supervisor_id: str = ''
    timestamp: datetime = field(default_factory=timezone.now)

    def stamped(self, user_id: str = '', floor_supervisor_id: str = '',
                change_reason: str = '') -> AuditRecord:
        """Copy carrying actor ids; values already set are kept."""
        return replace(
            self,
            user_id=self.user_id or user_id,
            floor_supervisor_id=self.floor_supervisor_id or floor_supervisor_id,
            change_reason=self.change_reason or change_reason,
        )


@dataclass(frozen=True)
class AuditOutcome:
    """Delivery result of one record. Never affects the mutation itself."""

    record: AuditRecord
    delivered: bool
    error: str | None = None


@runtime_checkable
class AuditSink(Protocol):
    """
    Protocol for audit trail storage.

    append() may raise; callers treat any exception as a failed
    delivery and carry on.
    """

    def append(self, record: AuditRecord, article=None) -> None:
        """
        Store one audit record.

        Args:
            record: The change to store
            article: Article instance the change belongs to, if any
        """
        ...
