"""
Ledger consistency repair.

A deterministic, idempotent pass run before every persist. It never
raises: every violation found is clamped and described in a note that
the caller may log.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from floorman.floors import allows_overproduction
from floorman.ledger import GradingEntry, KnittingEntry, Ledger


GRADE_FIELDS = ('m1_quantity', 'm2_quantity', 'm3_quantity', 'm4_quantity')


@dataclass
class ConsistencyReport:
    """Repaired copy of a ledger plus one note per correction."""

    ledger: Ledger
    corrections: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.corrections)


def check_consistency(ledger: Ledger, sequence) -> ConsistencyReport:
    """
    Clamp invariant violations on every floor of a ledger.

    Applied per floor, in order:
    1. negative counters become 0
    2. transferred <= received (not on an overproducing first floor)
    3. completed <= received (same exception); at grading floors
       completed is then raised to transferred
    4. grading floors: M1-M4 rescaled proportionally when their sum
       exceeds received; knitting: m4 <= completed
    5. remaining recomputed from the repaired counters

    The input ledger is not modified.
    """
    repaired = ledger.copy()
    notes: list[str] = []

    for floor, entry in repaired.items():
        name = floor.value
        exempt = allows_overproduction(floor, sequence)

        for f in fields(entry):
            value = getattr(entry, f.name)
            if isinstance(value, int) and value < 0:
                notes.append(f"{name}: {f.name} was negative ({value}), set to 0")
                setattr(entry, f.name, 0)

        if not exempt and entry.transferred > entry.received:
            notes.append(
                f"{name}: transferred ({entry.transferred}) exceeded "
                f"received ({entry.received}), clamped"
            )
            entry.transferred = entry.received

        if not exempt and entry.completed > entry.received:
            notes.append(
                f"{name}: completed ({entry.completed}) exceeded "
                f"received ({entry.received}), clamped"
            )
            entry.completed = entry.received

        if isinstance(entry, GradingEntry):
            if entry.completed < entry.transferred:
                notes.append(
                    f"{name}: completed ({entry.completed}) raised to "
                    f"transferred ({entry.transferred})"
                )
                entry.completed = entry.transferred
            if entry.quality_total > entry.received:
                notes.append(
                    f"{name}: quality total ({entry.quality_total}) exceeded "
                    f"received ({entry.received}), rescaled"
                )
                _rescale_grades(entry, entry.received)

        if isinstance(entry, KnittingEntry) and entry.m4_quantity > entry.completed:
            notes.append(
                f"{name}: m4_quantity ({entry.m4_quantity}) exceeded "
                f"completed ({entry.completed}), clamped"
            )
            entry.m4_quantity = entry.completed

        before = _remaining_fields(entry)
        entry.recompute_remaining()
        after = _remaining_fields(entry)
        for key, old in before.items():
            if after[key] != old:
                notes.append(f"{name}: {key} recomputed from {old} to {after[key]}")

    return ConsistencyReport(ledger=repaired, corrections=notes)


def _rescale_grades(entry: GradingEntry, target: int) -> None:
    """Scale M1-M4 so they add up to exactly target (largest remainder)."""
    values = [getattr(entry, name) for name in GRADE_FIELDS]
    total = sum(values)
    shares = [value * target // total for value in values]
    leftovers = [value * target % total for value in values]

    shortfall = target - sum(shares)
    order = sorted(range(len(values)), key=lambda i: (-leftovers[i], i))
    for i in order[:shortfall]:
        shares[i] += 1

    for name, share in zip(GRADE_FIELDS, shares):
        setattr(entry, name, share)


def _remaining_fields(entry) -> dict[str, int]:
    if isinstance(entry, GradingEntry):
        return {
            'remaining': entry.remaining,
            'm1_remaining': entry.m1_remaining,
            'm2_remaining': entry.m2_remaining,
        }
    return {'remaining': entry.remaining}
