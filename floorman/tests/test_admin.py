"""
Tests for the read-only admin.
"""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from floorman.admin import ArticleAdmin, ArticleLogAdmin
from floorman.models import Article, ArticleLog


class TestRegistration:
    """Both models are registered read-only."""

    @pytest.mark.parametrize('model, admin_class', [
        (Article, ArticleAdmin),
        (ArticleLog, ArticleLogAdmin),
    ])
    def test_registered_read_only(self, model, admin_class):
        model_admin = admin.site._registry[model]
        request = RequestFactory().get('/')

        assert isinstance(model_admin, admin_class)
        assert model_admin.has_add_permission(request) is False
        assert model_admin.has_change_permission(request) is False
        assert model_admin.has_delete_permission(request) is False


@pytest.mark.django_db
class TestRepairAction:
    """Tests for the 'repair selected ledgers' action."""

    def test_repairs_selected(self, article, rosso_article, admin_user, monkeypatch):
        quantities = dict(article.floor_quantities)
        quantities['Washing'] = {'received': 3, 'completed': 9}
        Article.objects.filter(pk=article.pk).update(floor_quantities=quantities)

        messages = []
        model_admin = admin.site._registry[Article]
        monkeypatch.setattr(model_admin, 'message_user',
                            lambda request, message: messages.append(str(message)))
        request = RequestFactory().post('/')
        request.user = admin_user

        model_admin.repair_ledgers(request, Article.objects.all())

        assert Article.objects.get(pk=article.pk).floor_quantities['Washing']['completed'] == 3
        assert messages == ['1 ledger(s) corrected.']
