"""
Floorman Catalog Adapter — loads the configured ProcessCatalog.

Usage:
    from floorman.adapters import get_process_catalog

    catalog = get_process_catalog()
    steps = catalog.find_process_steps("ART-001")

Settings:
    FLOORMAN = {
        "PROCESS_CATALOG": "catalog.adapters.process_catalog.CatalogProcessSteps",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from floorman.conf import floorman_settings
from floorman.protocols.catalog import ProcessCatalog, ProcessStep

logger = logging.getLogger(__name__)


# Cached catalog instance
_lock = threading.Lock()
_process_catalog: ProcessCatalog | None = None


class StaticProcessCatalog:
    """
    In-memory catalog backed by a mapping.

    Usage:
        catalog = StaticProcessCatalog({
            "ART-001": ["Knitting", "Linking", "Checking", "Dispatch"],
        })
    """

    def __init__(self, products: dict[str, list] | None = None):
        self.products: dict[str, list[ProcessStep]] = {}
        for article_number, steps in (products or {}).items():
            self.add(article_number, steps)

    def add(self, article_number: str, steps: list) -> None:
        self.products[article_number] = [
            step if isinstance(step, ProcessStep) else ProcessStep(name=str(step), sort_order=i)
            for i, step in enumerate(steps)
        ]

    def find_process_steps(self, article_number: str) -> list[ProcessStep] | None:
        steps = self.products.get(article_number)
        return list(steps) if steps is not None else None


def get_process_catalog() -> ProcessCatalog:
    """
    Return the configured process catalog.

    Raises:
        ImproperlyConfigured: If the PROCESS_CATALOG import fails
    """
    global _process_catalog

    if _process_catalog is None:
        with _lock:
            if _process_catalog is None:  # double-checked
                catalog_path = floorman_settings.PROCESS_CATALOG
                try:
                    catalog_class = import_string(catalog_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import process catalog '{catalog_path}': {e}"
                    ) from e
                _process_catalog = catalog_class()
                logger.debug("Loaded process catalog: %s", catalog_path)

    return _process_catalog


def reset_process_catalog() -> None:
    """Reset the cached catalog. Useful for testing."""
    global _process_catalog
    _process_catalog = None
