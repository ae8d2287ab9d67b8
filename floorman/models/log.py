"""
ArticleLog model — Immutable audit trail of ledger changes.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from floorman.models.enums import LogAction


class ArticleLog(models.Model):
    """
    Immutable record of one ledger change.

    Rules:
    - NEVER update() or delete()
    - Corrections show up as new entries
    """

    article = models.ForeignKey(
        'floorman.Article',
        on_delete=models.PROTECT,
        related_name='logs',
        verbose_name=_('Article'),
    )
    order_id = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Order'))

    action = models.CharField(
        max_length=40,
        choices=LogAction.choices,
        verbose_name=_('Action'),
    )
    quantity = models.IntegerField(
        default=0,
        verbose_name=_('Quantity'),
        help_text=_('Change for counter updates, units moved for transfers'),
    )
    floor = models.CharField(max_length=30, blank=True, default='', verbose_name=_('Floor'))
    from_floor = models.CharField(max_length=30, blank=True, default='', verbose_name=_('From Floor'))
    to_floor = models.CharField(max_length=30, blank=True, default='', verbose_name=_('To Floor'))
    previous_value = models.JSONField(null=True, blank=True, verbose_name=_('Previous Value'))
    new_value = models.JSONField(null=True, blank=True, verbose_name=_('New Value'))

    remarks = models.TextField(blank=True, default='', verbose_name=_('Remarks'))
    change_reason = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Change Reason'))
    quality_status = models.CharField(max_length=40, blank=True, default='', verbose_name=_('Quality Status'))
    batch_number = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Batch Number'))

    user_id = models.CharField(max_length=64, blank=True, default='', verbose_name=_('User'))
    floor_supervisor_id = models.CharField(
        max_length=64, blank=True, default='', verbose_name=_('Floor Supervisor'),
    )
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))

    class Meta:
        verbose_name = _('Article Log')
        verbose_name_plural = _('Article Logs')
        ordering = ['timestamp', 'pk']
        indexes = [
            models.Index(fields=['article', 'timestamp'], name='floorman_ar_article_3f9a0d_idx'),
            models.Index(fields=['action'], name='floorman_ar_action_5b2c71_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Article logs are immutable. Record a new entry instead.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion. Logs are immutable."""
        raise ValueError("Article logs are immutable and cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.action} | {self.floor} | {self.quantity}"
