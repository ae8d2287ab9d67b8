"""
Noop Process Catalog — Stub adapter for development and testing.

This adapter implements the ProcessCatalog protocol by knowing no
products at all, so every article resolves to its linking-type
default flow.

Usage in settings.py:
    FLOORMAN = {
        "PROCESS_CATALOG": "floorman.adapters.noop.NoopProcessCatalog",
    }
"""

from __future__ import annotations

from floorman.protocols.catalog import ProcessStep


class NoopProcessCatalog:
    """
    No-operation process catalog.

    Suitable for:

    - Local development without a product catalog
    - Tests that only exercise the linking-type fallback
    """

    def find_process_steps(self, article_number: str) -> list[ProcessStep] | None:
        """
        Look up process steps. Always returns None (product not found).
        """
        return None
