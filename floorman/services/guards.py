"""
Input guards shared by the ledger engines.

Each guard raises before anything is mutated, which is what keeps the
engine operations all-or-nothing.
"""

from floorman.exceptions import StateError, ValidationError
from floorman.floors import is_grading
from floorman.ledger import ArticleSnapshot, GradingEntry


def require_count(value, field: str = 'quantity') -> int:
    """
    Non-negative whole number.

    Raises:
        ValidationError('INVALID_QUANTITY'): not an int, a bool, or negative
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError('INVALID_QUANTITY', field=field, requested=value)
    return value


def require_positive(value, field: str = 'quantity') -> int:
    value = require_count(value, field)
    if value == 0:
        raise ValidationError('INVALID_QUANTITY', field=field, requested=value)
    return value


def require_grading_floor(snapshot: ArticleSnapshot, floor) -> tuple:
    """
    Resolve a grading floor of the flow and its entry.

    Raises:
        StateError('FLOOR_NOT_IN_FLOW'): floor is not in the sequence
        StateError('WRONG_FLOOR_KIND'): floor does not grade quality
    """
    floor = snapshot.require_in_flow(floor)
    if not is_grading(floor):
        raise StateError('WRONG_FLOOR_KIND', floor=floor.value, expected='grading')
    entry: GradingEntry = snapshot.entry(floor)
    return floor, entry
