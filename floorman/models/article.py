"""
Article model — one production lot moving through the floors.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from floorman.exceptions import FloorError
from floorman.models.enums import ArticleStatus, LinkingType, Priority, ProductionFloor


class ArticleQuerySet(models.QuerySet):
    """QuerySet with helpers for Article queries."""

    def active(self):
        """Articles still moving through the floors."""
        return self.filter(
            status__in=[ArticleStatus.PENDING, ArticleStatus.IN_PROGRESS]
        )

    def for_order(self, order_id: str):
        return self.filter(order_id=order_id)


class Article(models.Model):
    """
    Per-floor quantity ledger of one article.

    floor_quantities is the serialized Ledger and floor_sequence the
    resolved flow. Both are only changed through the Production facade,
    which also bumps version on every write.

    planned_quantity is fixed at creation.
    """

    code = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('Code'),
    )
    article_number = models.CharField(
        max_length=64,
        db_index=True,
        verbose_name=_('Article Number'),
        help_text=_('Links to the product definition'),
    )
    order_id = models.CharField(
        max_length=64,
        blank=True,
        default='',
        db_index=True,
        verbose_name=_('Order'),
    )
    planned_quantity = models.PositiveIntegerField(
        verbose_name=_('Planned Quantity'),
    )
    linking_type = models.CharField(
        max_length=20,
        choices=LinkingType.choices,
        default=LinkingType.ROSSO_LINKING,
        verbose_name=_('Linking Type'),
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        verbose_name=_('Priority'),
    )
    status = models.CharField(
        max_length=20,
        choices=ArticleStatus.choices,
        default=ArticleStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    progress = models.PositiveSmallIntegerField(
        default=0,
        verbose_name=_('Progress (%)'),
    )

    floor_sequence = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Floor Sequence'),
    )
    floor_quantities = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Floor Quantities'),
    )
    final_quality_confirmed = models.BooleanField(
        default=False,
        verbose_name=_('Final Quality Confirmed'),
    )
    remarks = models.TextField(blank=True, default='', verbose_name=_('Remarks'))

    # Optimistic concurrency token
    version = models.PositiveIntegerField(default=0, verbose_name=_('Version'))

    started_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Started At'))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completed At'))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Created At'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Updated At'))

    objects = ArticleQuerySet.as_manager()

    class Meta:
        verbose_name = _('Article')
        verbose_name_plural = _('Articles')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['order_id', 'status'], name='floorman_ar_order_i_7c1e2b_idx'),
        ]

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        if 'planned_quantity' in field_names:
            instance._loaded_planned_quantity = instance.planned_quantity
        return instance

    def save(self, *args, **kwargs):
        """Save article; planned_quantity may not change once stored."""
        loaded = getattr(self, '_loaded_planned_quantity', None)
        if self.pk and loaded is not None and loaded != self.planned_quantity:
            raise FloorError(
                'PLANNED_QUANTITY_IMMUTABLE',
                article=self.code,
                available=loaded,
                requested=self.planned_quantity,
            )
        super().save(*args, **kwargs)
        self._loaded_planned_quantity = self.planned_quantity

    def __str__(self) -> str:
        return f"{self.code} ({self.article_number})"

    # ══════════════════════════════════════════════════════════════
    # SNAPSHOTS
    # ══════════════════════════════════════════════════════════════

    def snapshot(self):
        """In-memory ArticleSnapshot of the stored ledger."""
        # Import here to avoid circular import
        from floorman.ledger import ArticleSnapshot, Ledger

        return ArticleSnapshot(
            code=self.code,
            article_number=self.article_number,
            order_id=self.order_id,
            planned_quantity=self.planned_quantity,
            linking_type=self.linking_type,
            sequence=[ProductionFloor(name) for name in self.floor_sequence],
            ledger=Ledger.from_dict(self.floor_quantities),
            final_quality_confirmed=self.final_quality_confirmed,
            progress=self.progress,
            status=self.status,
        )

    def apply_snapshot(self, snapshot) -> None:
        """Copy ledger state from a snapshot onto the model fields."""
        self.floor_sequence = [floor.value for floor in snapshot.sequence]
        self.floor_quantities = snapshot.ledger.to_dict()
        self.final_quality_confirmed = snapshot.final_quality_confirmed
        self.progress = snapshot.progress
        self.status = snapshot.status
