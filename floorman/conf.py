"""
Floorman configuration.

Usage in settings.py:
    FLOORMAN = {
        "PROCESS_CATALOG": "catalog.adapters.process_catalog.CatalogProcessSteps",
        "AUDIT_SINK": "floorman.adapters.audit.ArticleLogSink",
        "SYSTEM_ACTOR": "system",
        "LOG_CORRECTIONS": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class FloormanSettings:
    """Floorman configuration settings."""

    # Product definition lookup backend (dotted path)
    PROCESS_CATALOG: str = "floorman.adapters.noop.NoopProcessCatalog"

    # Audit sink backend (dotted path)
    AUDIT_SINK: str = "floorman.adapters.audit.ArticleLogSink"

    # Actor id recorded when no user/supervisor is given
    SYSTEM_ACTOR: str = "system"

    # Log ConsistencyRepair corrections when persisting
    LOG_CORRECTIONS: bool = True


def get_floorman_settings() -> FloormanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "FLOORMAN", {})
    return FloormanSettings(**{
        k: v for k, v in user_settings.items()
        if k in FloormanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_floorman_settings(), name)


floorman_settings = _LazySettings()
