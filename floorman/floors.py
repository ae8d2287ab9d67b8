"""
Floor kinds and floor-level policy rules.

Every floor-specific decision the engines make goes through one of the
functions here, keyed by the closed ProductionFloor enumeration.
"""

from floorman.models.enums import LinkingType, ProductionFloor


FLOOR_ORDER: tuple[ProductionFloor, ...] = tuple(ProductionFloor)

GRADING_FLOORS: frozenset[ProductionFloor] = frozenset({
    ProductionFloor.CHECKING,
    ProductionFloor.SECONDARY_CHECKING,
    ProductionFloor.FINAL_CHECKING,
})

# Linking types that join panels automatically and never visit Linking
AUTOMATIC_LINKING: frozenset[LinkingType] = frozenset({LinkingType.AUTO_LINKING})


def as_floor(value) -> ProductionFloor:
    """Coerce a floor name or enum member to ProductionFloor."""
    return value if isinstance(value, ProductionFloor) else ProductionFloor(value)


def is_grading(floor) -> bool:
    return as_floor(floor) in GRADING_FLOORS


def is_knitting(floor) -> bool:
    return as_floor(floor) == ProductionFloor.KNITTING


def is_first(floor, sequence) -> bool:
    return bool(sequence) and as_floor(floor) == sequence[0]


def allows_overproduction(floor, sequence) -> bool:
    """
    Whether a floor may complete or transfer more than it received.

    Only the first floor of the resolved flow does: knitting output is
    measured after the fact and regularly exceeds the planned quantity.
    Every other floor is capped by what it received. This asymmetry is
    kept as a single rule so it can be revisited in one place.
    """
    return is_first(floor, sequence) and not is_grading(floor)


def linking_fallback(linking_type) -> list[ProductionFloor]:
    """Default flow for articles whose product definition cannot be used."""
    floors = list(FLOOR_ORDER)
    if linking_type is not None and LinkingType(linking_type) in AUTOMATIC_LINKING:
        floors.remove(ProductionFloor.LINKING)
    return floors
