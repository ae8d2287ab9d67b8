"""
Production Service — The single public interface for article ledger operations.

Usage:
    from floorman import production, FloorError

    article = production.create_article('A-1001', 'ART-77', 1000,
                                        linking_type=LinkingType.AUTO_LINKING)
    production.complete(article, ProductionFloor.KNITTING, 750)
    production.transfer(article, ProductionFloor.KNITTING)
    production.progress(article)  # 75
"""

import logging
from typing import Any, Callable

from django.db import transaction
from django.utils import timezone

from floorman.adapters.audit import emit, get_audit_sink
from floorman.adapters.catalog import get_process_catalog
from floorman.conf import floorman_settings
from floorman.consistency import ConsistencyReport, check_consistency
from floorman.exceptions import ConcurrencyError, ValidationError
from floorman.flow import FloorFlowResolver, FlowResolution, clear_floors_outside
from floorman.ledger import ArticleSnapshot
from floorman.models.article import Article
from floorman.models.enums import ArticleStatus, LinkingType, LogAction, Priority
from floorman.progress import calculate_progress, derive_status
from floorman.protocols.audit import AuditRecord
from floorman.results import EngineResult, OperationResult
from floorman.services import (
    FloorQueries,
    FloorTransfers,
    LedgerCompletion,
    QualityGrading,
    RepairLoop,
)
from floorman.services.guards import require_positive

logger = logging.getLogger('floorman')


class Production:
    """
    Single interface for all article ledger operations.

    Parameter convention: (article, floor, quantity, ...)

    Every mutation runs as one unit: lock the row, check the caller's
    version, apply exactly one engine operation to a snapshot, run the
    consistency pass, persist, then hand audit records to the sink.
    Engine errors leave the stored article untouched.

    Mutations accept audit context as keyword arguments (user_id,
    floor_supervisor_id, change_reason); they are stamped on every
    audit record the operation produces.
    """

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def resolve_flow(cls, article_number: str, linking_type=None) -> FlowResolution:
        """
        Floor sequence for an article number.

        Uses the configured process catalog, falling back to the
        linking-type default when the product is missing or unusable.
        """
        return FloorFlowResolver(get_process_catalog()).resolve(article_number, linking_type)

    @classmethod
    def floor_status(cls, article: Article, floor) -> dict[str, Any]:
        """Counters and completion rate of one floor of the flow."""
        return FloorQueries.floor_status(article.snapshot(), floor)

    @classmethod
    def floor_statuses(cls, article: Article) -> list[dict[str, Any]]:
        """Floor status of every floor in the flow."""
        return FloorQueries.floor_statuses(article.snapshot())

    @classmethod
    def progress(cls, article: Article) -> int:
        """Completion percentage derived from the stored ledger."""
        return calculate_progress(article.snapshot())

    @classmethod
    def check(cls, article: Article) -> ConsistencyReport:
        """Run the consistency pass without saving anything."""
        snapshot = article.snapshot()
        return check_consistency(snapshot.ledger, snapshot.sequence)

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_article(cls, code: str, article_number: str, planned_quantity: int,
                       linking_type=LinkingType.ROSSO_LINKING, priority=Priority.MEDIUM,
                       order_id: str = '', remarks: str = '', **audit) -> Article:
        """
        Create an article with its flow resolved and first floor seeded.

        The planned quantity is received on the first floor of the flow
        and never changes afterwards.

        Raises:
            ValidationError('INVALID_QUANTITY'): planned_quantity <= 0
            ValidationError('INVALID_LINKING_TYPE'): unknown linking type
            ValidationError('INVALID_PRIORITY'): unknown priority
        """
        planned_quantity = require_positive(planned_quantity, 'planned_quantity')
        try:
            linking_type = LinkingType(linking_type)
        except ValueError:
            raise ValidationError('INVALID_LINKING_TYPE', linking_type=linking_type) from None
        try:
            priority = Priority(priority)
        except ValueError:
            raise ValidationError('INVALID_PRIORITY', priority=priority) from None
        sink = get_audit_sink()
        resolution = cls.resolve_flow(article_number, linking_type)

        snapshot = ArticleSnapshot.seed(
            article_number=article_number,
            planned_quantity=planned_quantity,
            sequence=resolution.floors,
            code=code,
            order_id=order_id,
            linking_type=linking_type.value,
        )
        snapshot.progress = calculate_progress(snapshot)

        with transaction.atomic():
            article = Article(
                code=code,
                article_number=article_number,
                order_id=order_id,
                planned_quantity=planned_quantity,
                linking_type=linking_type.value,
                priority=priority.value,
                remarks=remarks,
            )
            article.apply_snapshot(snapshot)
            article.save()

        record = AuditRecord(
            action=LogAction.ARTICLE_ADDED.value,
            quantity=planned_quantity,
            floor=snapshot.first_floor.value,
            new_value=planned_quantity,
            remarks=remarks,
        )
        emit(sink, [cls._stamp(record, audit)], article)

        logger.info(
            "article.create",
            extra={
                "article": code,
                "article_number": article_number,
                "planned": planned_quantity,
                "flow_source": resolution.source,
                "sequence": [floor.value for floor in resolution.floors],
            },
        )
        return article

    @classmethod
    def refresh_flow(cls, article: Article, **audit) -> OperationResult:
        """
        Re-resolve the article's flow.

        Counters on floors that drop out of the flow are cleared; each
        clear is reported as a correction.
        """
        resolution = cls.resolve_flow(article.article_number, article.linking_type)

        def mutate(snapshot: ArticleSnapshot) -> EngineResult:
            snapshot.sequence = list(resolution.floors)
            cleared = clear_floors_outside(snapshot.ledger, snapshot.sequence)
            first = snapshot.entry(snapshot.first_floor)
            if first.is_empty():
                first.received = snapshot.planned_quantity
                first.recompute_remaining()
            return EngineResult(
                data={
                    'sequence': [floor.value for floor in snapshot.sequence],
                    'source': resolution.source,
                    'reason': resolution.reason,
                },
                corrections=cleared,
            )

        return cls._run('refresh_flow', article, mutate, audit)

    @classmethod
    def repair(cls, article: Article, **audit) -> OperationResult:
        """Persist the consistency pass on its own (self-healing)."""
        return cls._run('repair', article, lambda snapshot: EngineResult(), audit)

    # ══════════════════════════════════════════════════════════════
    # FLOOR OPERATIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def complete(cls, article: Article, floor, quantity: int, remarks: str = '',
                 **audit) -> OperationResult:
        """
        Set a floor's completed quantity.

        See LedgerCompletion.complete for the rules per floor kind.
        """
        return cls._run(
            'complete', article,
            lambda snapshot: LedgerCompletion.complete(snapshot, floor, quantity, remarks),
            audit,
        )

    @classmethod
    def record_knitting_defects(cls, article: Article, m4_quantity: int, remarks: str = '',
                                **audit) -> OperationResult:
        """Record defective units found at knitting (0..completed)."""
        return cls._run(
            'record_knitting_defects', article,
            lambda snapshot: LedgerCompletion.record_knitting_defects(snapshot, m4_quantity, remarks),
            audit,
        )

    @classmethod
    def transfer(cls, article: Article, from_floor, quantity: int | None = None,
                 batch_number: str = '', remarks: str = '', **audit) -> OperationResult:
        """
        Move units to the next floor of the flow.

        quantity=None moves everything currently transferable.
        See FloorTransfers.transfer for the ceilings per floor kind.
        """
        return cls._run(
            'transfer', article,
            lambda snapshot: FloorTransfers.transfer(
                snapshot, from_floor, quantity, batch_number=batch_number, remarks=remarks,
            ),
            audit,
        )

    @classmethod
    def record_grading(cls, article: Article, floor, m1: int = 0, m2: int = 0, m3: int = 0,
                       m4: int = 0, repair_status: str | None = None,
                       repair_remarks: str | None = None,
                       inspected_quantity: int | None = None, remarks: str = '',
                       **audit) -> OperationResult:
        """Write the M1-M4 split of a grading floor."""
        return cls._run(
            'record_grading', article,
            lambda snapshot: QualityGrading.record_grading(
                snapshot, floor, m1, m2, m3, m4,
                repair_status=repair_status,
                repair_remarks=repair_remarks,
                inspected_quantity=inspected_quantity,
                remarks=remarks,
            ),
            audit,
        )

    @classmethod
    def shift_m2(cls, article: Article, floor, from_m2: int, to_m1: int = 0, to_m3: int = 0,
                 to_m4: int = 0, remarks: str = '', **audit) -> OperationResult:
        """Re-categorize repairable units into M1, M3 or M4."""
        return cls._run(
            'shift_m2', article,
            lambda snapshot: QualityGrading.shift_m2(
                snapshot, floor, from_m2, to_m1, to_m3, to_m4, remarks=remarks,
            ),
            audit,
        )

    @classmethod
    def confirm_final_quality(cls, article: Article, confirmed: bool = True, remarks: str = '',
                              floor=None, **audit) -> OperationResult:
        """Approve or reject the article's final quality."""
        return cls._run(
            'confirm_final_quality', article,
            lambda snapshot: QualityGrading.confirm_final_quality(
                snapshot, confirmed, remarks=remarks, floor=floor,
            ),
            audit,
        )

    @classmethod
    def repair_transfer(cls, article: Article, from_floor, quantity: int | None = None,
                        target_floor=None, remarks: str | None = None,
                        **audit) -> OperationResult:
        """Send M2 units from a grading floor back to an earlier floor."""
        return cls._run(
            'repair_transfer', article,
            lambda snapshot: RepairLoop.repair_transfer(
                snapshot, from_floor, quantity, target_floor=target_floor, remarks=remarks,
            ),
            audit,
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _run(cls, operation: str, article: Article,
             mutate: Callable[[ArticleSnapshot], EngineResult],
             audit: dict[str, str]) -> OperationResult:
        """
        Apply one engine operation and persist it.

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Article
            - Rejects the call if the stored version moved on since the
              caller loaded the article

        The audit sink is resolved before the transaction opens, so a
        misconfigured sink fails the call with nothing saved.
        """
        sink = get_audit_sink()
        with transaction.atomic():
            locked = Article.objects.select_for_update().get(pk=article.pk)
            if locked.version != article.version:
                raise ConcurrencyError(
                    article=locked.code,
                    expected=article.version,
                    found=locked.version,
                )

            snapshot = locked.snapshot()
            outcome = mutate(snapshot)
            report = check_consistency(snapshot.ledger, snapshot.sequence)
            snapshot.ledger = report.ledger
            corrections = outcome.corrections + report.corrections
            snapshot.progress = calculate_progress(snapshot)
            snapshot.status = derive_status(snapshot)
            cls._persist(locked, snapshot)

        records = [cls._stamp(record, audit) for record in outcome.records]
        outcomes = emit(sink, records, locked)
        article.refresh_from_db()

        if corrections and floorman_settings.LOG_CORRECTIONS:
            logger.warning(
                "floor.corrected",
                extra={
                    "article": locked.code,
                    "operation": operation,
                    "corrections": corrections,
                },
            )
        for warning in outcome.warnings:
            logger.warning(
                "floor.warning",
                extra={"article": locked.code, "operation": operation, "warning": warning},
            )
        logger.info(
            f"floor.{operation}",
            extra={
                "article": locked.code,
                "version": locked.version,
                "progress": snapshot.progress,
                **{k: v for k, v in outcome.data.items() if not isinstance(v, (list, dict))},
            },
        )

        return OperationResult(
            operation=operation,
            data=outcome.data,
            records=records,
            corrections=corrections,
            warnings=outcome.warnings,
            audit=outcomes,
        )

    @classmethod
    def _persist(cls, article: Article, snapshot: ArticleSnapshot) -> None:
        article.apply_snapshot(snapshot)
        now = timezone.now()
        if snapshot.status in (ArticleStatus.IN_PROGRESS, ArticleStatus.COMPLETED) and article.started_at is None:
            article.started_at = now
        if snapshot.status == ArticleStatus.COMPLETED and article.completed_at is None:
            article.completed_at = now
        article.version += 1
        article.save()

    @classmethod
    def _stamp(cls, record: AuditRecord, audit: dict[str, str]) -> AuditRecord:
        user_id = audit.get('user_id', '')
        supervisor_id = audit.get('floor_supervisor_id', '')
        if not user_id and not supervisor_id:
            user_id = floorman_settings.SYSTEM_ACTOR
        return record.stamped(
            user_id=user_id,
            floor_supervisor_id=supervisor_id,
            change_reason=audit.get('change_reason', ''),
        )
