"""
Shift capacity tracking.

Capacity is measured against a caller-supplied snapshot of a shift's
assignments. On-leave assignments have vacated their slot and do not count;
the slot is not backfilled automatically.
"""

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from apps.scheduling.models import Shift, ShiftAssignment


def occupied_slots(assignments: Iterable["ShiftAssignment"]) -> int:
    """Count the assignments that hold a slot (status other than on_leave)."""
    from apps.scheduling.models import ShiftAssignment

    return sum(1 for a in assignments if a.status != ShiftAssignment.Status.ON_LEAVE)


def remaining_slots(shift: "Shift", assignments: Iterable["ShiftAssignment"]) -> int:
    """Return the number of open slots left on ``shift``, never below zero."""
    return max(0, shift.required_nurses - occupied_slots(assignments))


def is_full(shift: "Shift", assignments: Iterable["ShiftAssignment"]) -> bool:
    return remaining_slots(shift, assignments) == 0
