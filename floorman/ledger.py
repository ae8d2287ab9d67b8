"""
Per-article, per-floor quantity ledger.

Entries are a small tagged union:

- StandardEntry: plain received/completed/transferred/remaining counters
- KnittingEntry: standard counters plus defects found at knitting (m4)
- GradingEntry: standard counters plus the M1-M4 quality split

Which kind a floor gets is decided once, by entry_for(floor).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, ClassVar, Iterator

from floorman.exceptions import StateError
from floorman.floors import FLOOR_ORDER, GRADING_FLOORS, as_floor, is_grading
from floorman.models.enums import (
    ArticleStatus,
    LinkingType,
    ProductionFloor,
    QualityGrade,
    RepairStatus,
)


# ══════════════════════════════════════════════════════════════
# ENTRIES
# ══════════════════════════════════════════════════════════════


@dataclass
class FloorEntry:
    """
    Counters shared by every floor.

    repair_received counts units that arrived through a repair loop
    rather than a forward transfer; they are included in received.
    """

    kind: ClassVar[str] = 'standard'

    received: int = 0
    completed: int = 0
    transferred: int = 0
    remaining: int = 0
    repair_received: int = 0

    def recompute_remaining(self) -> None:
        self.remaining = max(0, self.received - self.completed)

    def is_empty(self) -> bool:
        return not any(
            value for value in asdict(self).values()
            if isinstance(value, int)
        )

    def clear(self) -> None:
        for f in fields(self):
            setattr(self, f.name, f.default)

    def copy(self) -> FloorEntry:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FloorEntry:
        data = data or {}
        values = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            raw = data[f.name]
            values[f.name] = int(raw) if isinstance(f.default, int) else str(raw)
        return cls(**values)


@dataclass
class StandardEntry(FloorEntry):
    kind: ClassVar[str] = 'standard'


@dataclass
class KnittingEntry(FloorEntry):
    """Knitting counters; m4_quantity is the defective part of completed."""

    kind: ClassVar[str] = 'knitting'

    m4_quantity: int = 0

    @property
    def good_quantity(self) -> int:
        return max(0, self.completed - self.m4_quantity)


@dataclass
class GradingEntry(FloorEntry):
    """
    Counters of a quality grading floor.

    m1_quantity..m4_quantity split the inspected units by grade.
    Only M1 moves forward: m1_transferred/m1_remaining track it, and
    remaining mirrors m1_remaining. M2 units sent back through a repair
    loop leave m2_quantity and are counted in m2_transferred.
    """

    kind: ClassVar[str] = 'grading'

    m1_quantity: int = 0
    m2_quantity: int = 0
    m3_quantity: int = 0
    m4_quantity: int = 0
    m1_transferred: int = 0
    m1_remaining: int = 0
    m2_transferred: int = 0
    m2_remaining: int = 0
    repair_status: str = RepairStatus.NOT_REQUIRED.value
    repair_remarks: str = ''

    @property
    def quality_total(self) -> int:
        return self.m1_quantity + self.m2_quantity + self.m3_quantity + self.m4_quantity

    @property
    def categorized(self) -> int:
        """Units graded so far, including those already sent to repair."""
        return self.quality_total + self.m2_transferred

    def grade(self, grade) -> int:
        return getattr(self, _grade_field(grade))

    def set_grade(self, grade, quantity: int) -> None:
        setattr(self, _grade_field(grade), quantity)

    def recompute_remaining(self) -> None:
        self.m1_remaining = max(0, self.m1_quantity - self.m1_transferred)
        self.m2_remaining = max(0, self.m2_quantity - self.m2_transferred)
        self.remaining = self.m1_remaining


def _grade_field(grade) -> str:
    return f'{QualityGrade(grade).value.lower()}_quantity'


def entry_for(floor) -> FloorEntry:
    """Empty entry of the right kind for a floor."""
    floor = as_floor(floor)
    if floor in GRADING_FLOORS:
        return GradingEntry()
    if floor == ProductionFloor.KNITTING:
        return KnittingEntry()
    return StandardEntry()


def _entry_class(floor) -> type[FloorEntry]:
    return type(entry_for(floor))


# ══════════════════════════════════════════════════════════════
# LEDGER
# ══════════════════════════════════════════════════════════════


class Ledger:
    """
    One entry per production floor, keyed by ProductionFloor.

    Serializes to a plain dict keyed by floor name for JSON storage.
    Unknown keys in stored data are ignored.
    """

    def __init__(self, entries: dict[ProductionFloor, FloorEntry] | None = None):
        self._entries = {floor: entry_for(floor) for floor in FLOOR_ORDER}
        for floor, entry in (entries or {}).items():
            floor = as_floor(floor)
            if not isinstance(entry, _entry_class(floor)):
                raise TypeError(f"{floor.value} needs a {_entry_class(floor).__name__}")
            self._entries[floor] = entry

    def __getitem__(self, floor) -> FloorEntry:
        return self._entries[as_floor(floor)]

    def __iter__(self) -> Iterator[ProductionFloor]:
        return iter(self._entries)

    def items(self):
        return self._entries.items()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        active = {f.value: e for f, e in self._entries.items() if not e.is_empty()}
        return f"Ledger({active!r})"

    def copy(self) -> Ledger:
        return Ledger({floor: entry.copy() for floor, entry in self._entries.items()})

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {floor.value: entry.to_dict() for floor, entry in self._entries.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Ledger:
        entries = {}
        for floor in FLOOR_ORDER:
            if data and floor.value in data:
                entries[floor] = _entry_class(floor).from_dict(data[floor.value])
        return cls(entries)


# ══════════════════════════════════════════════════════════════
# ARTICLE SNAPSHOT
# ══════════════════════════════════════════════════════════════


@dataclass
class ArticleSnapshot:
    """
    In-memory view of one article that the engines operate on.

    Engines mutate the snapshot in place; the caller decides whether
    to persist it. Use copy() to keep an untouched original.
    """

    article_number: str
    planned_quantity: int
    sequence: list[ProductionFloor]
    ledger: Ledger = field(default_factory=Ledger)
    linking_type: str = LinkingType.ROSSO_LINKING.value
    order_id: str = ''
    code: str = ''
    final_quality_confirmed: bool = False
    progress: int = 0
    status: str = ArticleStatus.PENDING.value

    @classmethod
    def seed(cls, article_number: str, planned_quantity: int, sequence, **kwargs) -> ArticleSnapshot:
        """Fresh snapshot with the planned quantity received on the first floor."""
        snapshot = cls(
            article_number=article_number,
            planned_quantity=planned_quantity,
            sequence=[as_floor(f) for f in sequence],
            **kwargs,
        )
        if snapshot.sequence:
            first = snapshot.ledger[snapshot.sequence[0]]
            first.received = planned_quantity
            first.recompute_remaining()
        return snapshot

    def copy(self) -> ArticleSnapshot:
        return replace(self, sequence=list(self.sequence), ledger=self.ledger.copy())

    def entry(self, floor) -> FloorEntry:
        return self.ledger[floor]

    @property
    def first_floor(self) -> ProductionFloor | None:
        return self.sequence[0] if self.sequence else None

    @property
    def last_floor(self) -> ProductionFloor | None:
        return self.sequence[-1] if self.sequence else None

    @property
    def last_grading_floor(self) -> ProductionFloor | None:
        for floor in reversed(self.sequence):
            if is_grading(floor):
                return floor
        return None

    def require_in_flow(self, floor) -> ProductionFloor:
        """
        Return the floor as ProductionFloor.

        Raises:
            StateError('FLOOR_NOT_IN_FLOW'): floor is not part of the sequence
        """
        try:
            floor = as_floor(floor)
        except ValueError:
            raise StateError('FLOOR_NOT_IN_FLOW', floor=str(floor)) from None
        if floor not in self.sequence:
            raise StateError(
                'FLOOR_NOT_IN_FLOW',
                floor=floor.value,
                sequence=[f.value for f in self.sequence],
            )
        return floor

    def index(self, floor) -> int:
        return self.sequence.index(self.require_in_flow(floor))

    def next_floor(self, floor) -> ProductionFloor | None:
        position = self.index(floor) + 1
        return self.sequence[position] if position < len(self.sequence) else None

    def previous_floor(self, floor) -> ProductionFloor | None:
        position = self.index(floor)
        return self.sequence[position - 1] if position > 0 else None
