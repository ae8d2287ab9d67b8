"""
Floorman Audit Adapters — where AuditRecords end up.

Sinks:
    ArticleLogSink: one ArticleLog row per record (default)
    MemoryAuditSink: keeps records in a list (tests, dry runs)

Settings:
    FLOORMAN = {
        "AUDIT_SINK": "floorman.adapters.audit.ArticleLogSink",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils.module_loading import import_string

from floorman.conf import floorman_settings
from floorman.protocols.audit import AuditOutcome, AuditRecord, AuditSink

logger = logging.getLogger(__name__)


_lock = threading.Lock()
_audit_sink: AuditSink | None = None


class ArticleLogSink:
    """Store records as ArticleLog rows."""

    def append(self, record: AuditRecord, article=None) -> None:
        if article is None:
            raise ValueError("ArticleLogSink needs the article a record belongs to")

        from floorman.models.log import ArticleLog

        # Savepoint, so a failed insert cannot poison an outer transaction
        with transaction.atomic():
            ArticleLog.objects.create(
                article=article,
                order_id=article.order_id,
                action=record.action,
                quantity=record.quantity,
                floor=record.floor or '',
                from_floor=record.from_floor or '',
                to_floor=record.to_floor or '',
                previous_value=record.previous_value,
                new_value=record.new_value,
                remarks=record.remarks,
                change_reason=record.change_reason,
                quality_status=record.quality_status,
                batch_number=record.batch_number,
                user_id=record.user_id,
                floor_supervisor_id=record.floor_supervisor_id,
                timestamp=record.timestamp,
            )


class MemoryAuditSink:
    """Keep records in memory."""

    def __init__(self):
        self.records: list[AuditRecord] = []

    def append(self, record: AuditRecord, article=None) -> None:
        self.records.append(record)

    def actions(self) -> list[str]:
        return [record.action for record in self.records]

    def clear(self) -> None:
        self.records.clear()


def emit(sink: AuditSink, records: list[AuditRecord], article=None) -> list[AuditOutcome]:
    """
    Deliver records one by one.

    A failing append is logged and reported in its outcome; it never
    propagates, and later records are still attempted.
    """
    outcomes = []
    for record in records:
        try:
            sink.append(record, article)
        except Exception as e:
            logger.warning(
                "audit.append_failed",
                extra={
                    "action": record.action,
                    "floor": record.floor,
                    "article": getattr(article, 'code', None),
                    "error": str(e),
                },
            )
            outcomes.append(AuditOutcome(record=record, delivered=False, error=str(e)))
        else:
            outcomes.append(AuditOutcome(record=record, delivered=True))
    return outcomes


def get_audit_sink() -> AuditSink:
    """
    Return the configured audit sink.

    Raises:
        ImproperlyConfigured: If the AUDIT_SINK import fails
    """
    global _audit_sink

    if _audit_sink is None:
        with _lock:
            if _audit_sink is None:  # double-checked
                sink_path = floorman_settings.AUDIT_SINK
                try:
                    sink_class = import_string(sink_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import audit sink '{sink_path}': {e}"
                    ) from e
                _audit_sink = sink_class()
                logger.debug("Loaded audit sink: %s", sink_path)

    return _audit_sink


def reset_audit_sink() -> None:
    """Reset the cached sink. Useful for testing."""
    global _audit_sink
    _audit_sink = None
