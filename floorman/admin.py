"""
Floorman Admin — read-only views for production debugging.

- Article: ledger, flow and progress (read-only) with a "repair ledgers" action
- ArticleLog: read-only audit trail
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from floorman.models import Article, ArticleLog

logger = logging.getLogger(__name__)


# =========================================================================
# ARTICLE ADMIN (read-only with repair action)
# =========================================================================

@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """Article admin, read-only. Ledgers only change via the Production service."""

    list_display = ['code', 'article_number', 'order_id', 'planned_quantity',
                    'linking_type', 'priority', 'status', 'progress_display',
                    'final_quality_confirmed']
    list_filter = ['status', 'priority', 'linking_type', 'final_quality_confirmed']
    search_fields = ['code', 'article_number', 'order_id']
    readonly_fields = ['code', 'article_number', 'order_id', 'planned_quantity',
                       'linking_type', 'priority', 'status', 'progress',
                       'floor_sequence', 'floor_quantities', 'final_quality_confirmed',
                       'remarks', 'version', 'started_at', 'completed_at',
                       'created_at', 'updated_at']
    actions = ['repair_ledgers']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Progress'))
    def progress_display(self, obj):
        return f"{obj.progress}%"

    @admin.action(description=_('Repair selected ledgers'))
    def repair_ledgers(self, request, queryset):
        from floorman import production
        from floorman.exceptions import FloorError

        count = 0
        for article in queryset:
            try:
                result = production.repair(article, user_id=str(request.user.pk or ''))
            except FloorError as exc:
                logger.warning("repair_ledgers: failed to repair %s: %s", article.code, exc)
                continue
            if result.corrections:
                count += 1

        self.message_user(request, _('{count} ledger(s) corrected.').format(count=count))


# =========================================================================
# ARTICLE LOG ADMIN (read-only audit trail)
# =========================================================================

@admin.register(ArticleLog)
class ArticleLogAdmin(admin.ModelAdmin):
    """ArticleLog admin, read-only. Immutable audit trail."""

    list_display = ['timestamp', 'article', 'action', 'floor', 'quantity',
                    'quality_status', 'user_id']
    list_filter = ['action', 'floor', 'timestamp']
    search_fields = ['article__code', 'order_id', 'batch_number', 'remarks']
    readonly_fields = ['article', 'order_id', 'action', 'quantity', 'floor',
                       'from_floor', 'to_floor', 'previous_value', 'new_value',
                       'remarks', 'change_reason', 'quality_status', 'batch_number',
                       'user_id', 'floor_supervisor_id', 'timestamp']
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
