"""
Exceptions for Floorman.

All errors are FloorError subclasses with a structured code for programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Structured exception with a code, a message and context data.

    The message defaults to the class-level ``_default_messages`` entry
    for the code when not given explicitly.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': self.data,
        }


class FloorError(BaseError):
    """
    Structured exception for floor ledger operations.

    Usage:
        try:
            production.transfer(article, ProductionFloor.CHECKING, 90)
        except FloorError as e:
            if e.code == 'QUANTITY_EXCEEDS_LIMIT':
                print(f"Only {e.available} can be transferred")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_QUANTITY': 'Quantity must be a non-negative whole number',
        'QUANTITY_EXCEEDS_LIMIT': 'Quantity exceeds what the floor allows',
        'NOTHING_TO_TRANSFER': 'There is nothing left to transfer from this floor',
        'SHIFT_MISMATCH': 'Shifted quantities must add up to the M2 quantity taken',
        'INSPECTION_MISMATCH': 'Quality split must add up to the inspected quantity',
        'INVALID_TARGET_FLOOR': 'Target floor must come before the source floor',
        'INVALID_REPAIR_STATUS': 'Unknown repair status',
        'INVALID_LINKING_TYPE': 'Unknown linking type',
        'INVALID_PRIORITY': 'Unknown priority',
        'GRADING_INCOMPLETE': 'Quality grading must be completed before transfer',
        'FLOOR_NOT_IN_FLOW': "Floor is not part of the article's process flow",
        'WRONG_FLOOR_KIND': 'Operation is not allowed on this kind of floor',
        'TERMINAL_FLOOR': 'Cannot transfer from the last floor of the flow',
        'NOT_CATEGORIZED': 'All completed quantity must be categorized first',
        'PRODUCT_NOT_FOUND': 'Product definition not found',
        'NO_PROCESSES': 'Product has no process steps defined',
        'NO_MAPPED_FLOORS': 'No process step maps to a known floor',
        'PLANNED_QUANTITY_IMMUTABLE': 'Planned quantity cannot change after creation',
        'CONCURRENT_MODIFICATION': 'Article was modified concurrently',
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class ValidationError(FloorError):
    """Quantity or target outside what the operation accepts."""


class NotFoundError(FloorError):
    """Referenced product/process definition is absent."""


class StateError(FloorError):
    """Operation attempted on the wrong kind of floor or in the wrong state."""


class GradingIncompleteError(StateError, ValidationError):
    """Forward transfer from a grading floor whose output is not fully graded."""

    def __init__(self, message: str | None = None, **data: Any):
        super().__init__('GRADING_INCOMPLETE', message, **data)


class ConcurrencyError(FloorError):
    """Version token of the caller's article no longer matches storage."""

    def __init__(self, message: str | None = None, **data: Any):
        super().__init__('CONCURRENT_MODIFICATION', message, **data)
