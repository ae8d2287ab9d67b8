"""
Process Catalog Protocol — Interface for product definition lookup.

Floorman defines this protocol, the product catalog implements it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ProcessStep:
    """One declared step of a product's manufacturing process."""

    name: str
    sort_order: int | None = None


@runtime_checkable
class ProcessCatalog(Protocol):
    """
    Protocol for product definition lookup.

    Used only while resolving an article's floor flow. A missing
    product, or any exception raised here, makes the resolver fall
    back to the linking-type default sequence.
    """

    def find_process_steps(self, article_number: str) -> list[ProcessStep] | None:
        """
        Ordered process steps of the product behind an article number.

        Args:
            article_number: Article number (links to a product definition)

        Returns:
            List of steps in process order, or None if the product is unknown
        """
        ...
