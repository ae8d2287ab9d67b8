"""Django app configuration for Floorman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class FloormanConfig(AppConfig):
    """Configuration for Floorman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "floorman"
    verbose_name = _("Production Floors")
