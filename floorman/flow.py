"""
Floor flow resolution.

Turns an article's product definition into the ordered list of floors
the article visits. Falls back to a linking-type default when the
product definition is missing or unusable.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from floorman.exceptions import FloorError, NotFoundError
from floorman.floors import FLOOR_ORDER, linking_fallback
from floorman.ledger import Ledger
from floorman.models.enums import ProductionFloor
from floorman.protocols.catalog import ProcessCatalog

logger = logging.getLogger('floorman')


PROCESS_NAMES: dict[str, ProductionFloor] = {
    'knitting': ProductionFloor.KNITTING,
    'knit': ProductionFloor.KNITTING,
    'linking': ProductionFloor.LINKING,
    'link': ProductionFloor.LINKING,
    'checking': ProductionFloor.CHECKING,
    'check': ProductionFloor.CHECKING,
    'washing': ProductionFloor.WASHING,
    'wash': ProductionFloor.WASHING,
    'boarding': ProductionFloor.BOARDING,
    'board': ProductionFloor.BOARDING,
    'silicon': ProductionFloor.SILICON,
    'silicone': ProductionFloor.SILICON,
    'secondary checking': ProductionFloor.SECONDARY_CHECKING,
    'secondary check': ProductionFloor.SECONDARY_CHECKING,
    'branding': ProductionFloor.BRANDING,
    'brand': ProductionFloor.BRANDING,
    'final checking': ProductionFloor.FINAL_CHECKING,
    'final check': ProductionFloor.FINAL_CHECKING,
    'warehouse': ProductionFloor.WAREHOUSE,
    'dispatch': ProductionFloor.DISPATCH,
}

# Longest first, so "secondary check" wins over "check"
_BY_LENGTH = sorted(PROCESS_NAMES, key=len, reverse=True)
_COMPACT = {name.replace(' ', ''): floor for name, floor in PROCESS_NAMES.items()}


def _normalize(name: str) -> str:
    return re.sub(r'[\s_\-]+', ' ', name).strip().lower()


def map_process_to_floor(name: str | None) -> ProductionFloor | None:
    """
    Map a process step name to a floor.

    Accepts exact floor names in any case, compact spellings
    ("FinalChecking"), short forms ("wash", "final check") and names
    that contain one of those ("Hand Knitting Unit 2").
    Returns None when nothing matches.
    """
    if not name or not isinstance(name, str):
        return None

    normalized = _normalize(name)
    if not normalized:
        return None
    if normalized in PROCESS_NAMES:
        return PROCESS_NAMES[normalized]

    compact = normalized.replace(' ', '')
    if compact in _COMPACT:
        return _COMPACT[compact]

    for key in _BY_LENGTH:
        if re.search(rf'\b{re.escape(key)}', normalized):
            return PROCESS_NAMES[key]
    return None


def map_process_steps(article_number: str, steps) -> list[ProductionFloor]:
    """
    Map ordered process steps to a deduplicated floor list.

    Raises:
        NotFoundError('PRODUCT_NOT_FOUND'): steps is None
        NotFoundError('NO_PROCESSES'): steps is empty
        NotFoundError('NO_MAPPED_FLOORS'): no step maps to a floor
    """
    if steps is None:
        raise NotFoundError('PRODUCT_NOT_FOUND', article_number=article_number)
    if not steps:
        raise NotFoundError('NO_PROCESSES', article_number=article_number)

    floors: list[ProductionFloor] = []
    for step in steps:
        floor = map_process_to_floor(getattr(step, 'name', step))
        if floor is not None and floor not in floors:
            floors.append(floor)

    if not floors:
        raise NotFoundError(
            'NO_MAPPED_FLOORS',
            article_number=article_number,
            steps=[getattr(step, 'name', str(step)) for step in steps],
        )
    return floors


@dataclass(frozen=True)
class FlowResolution:
    """Resolved floor sequence and where it came from."""

    floors: tuple[ProductionFloor, ...]
    source: str  # 'product' | 'linking_type'
    reason: str = ''

    @property
    def from_product(self) -> bool:
        return self.source == 'product'


class FloorFlowResolver:
    """
    Resolve floor sequences against a ProcessCatalog.

    Usage:
        resolver = FloorFlowResolver(get_process_catalog())
        resolution = resolver.resolve('ART-001', LinkingType.AUTO_LINKING)
        resolution.floors  # (Knitting, Checking, ...)
    """

    def __init__(self, catalog: ProcessCatalog):
        self.catalog = catalog

    def resolve(self, article_number: str, linking_type=None) -> FlowResolution:
        try:
            steps = self.catalog.find_process_steps(article_number)
            floors = map_process_steps(article_number, steps)
        except FloorError as e:
            return self._fallback(article_number, linking_type, e.code)
        except Exception as e:
            logger.warning(
                "flow.catalog_failed",
                extra={"article_number": article_number, "error": str(e)},
            )
            return self._fallback(article_number, linking_type, 'CATALOG_ERROR')

        return FlowResolution(floors=tuple(floors), source='product')

    def _fallback(self, article_number, linking_type, reason) -> FlowResolution:
        floors = linking_fallback(linking_type)
        logger.info(
            "flow.fallback",
            extra={
                "article_number": article_number,
                "linking_type": str(linking_type),
                "reason": reason,
            },
        )
        return FlowResolution(floors=tuple(floors), source='linking_type', reason=reason)


def clear_floors_outside(ledger: Ledger, sequence) -> list[str]:
    """
    Zero the entries of floors that are not in the sequence.

    Returns one note per floor that held data.
    """
    notes = []
    for floor in FLOOR_ORDER:
        if floor in sequence:
            continue
        entry = ledger[floor]
        if not entry.is_empty():
            notes.append(f"{floor.value}: cleared counters of a floor outside the flow")
            entry.clear()
    return notes
