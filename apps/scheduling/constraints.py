"""
Assignment Constraint Engine for WardRoster.

This module decides whether a nurse may be assigned to a shift. Each constraint
is an independent, testable function that returns a ConstraintResult.

The pipeline runs constraints in a fixed order; the first failure short-circuits
the rest (ConstraintEngine.check_all runs everything for a "what-if" view).
Cheap identity checks come first so the overlap scan only runs when needed.

Constraints never touch the database. They work on an AssignmentSnapshot that
the caller builds inside a locked transaction (see services.py), so the
capacity count and the double-booking scan see a consistent view.

Usage:
    from apps.scheduling.constraints import ConstraintEngine, AssignmentSnapshot

    snapshot = AssignmentSnapshot(shift_assignments=[...], nurse_assignments=[...])
    result = ConstraintEngine.check(nurse, shift, snapshot)
    if not result.ok:
        result.raise_for_failure()
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from apps.scheduling import capacity, intervals
from core.exceptions import CONSTRAINT_ERRORS, SchedulingError

if TYPE_CHECKING:
    from apps.accounts.models import User
    from apps.scheduling.models import Shift, ShiftAssignment

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class AssignmentSnapshot:
    """
    Existing assignments relevant to one proposed (nurse, shift) pairing.

    Attributes:
        shift_assignments: Every assignment on the target shift.
        nurse_assignments: Every assignment held by the nurse, any shift.
    """

    shift_assignments: list["ShiftAssignment"] = field(default_factory=list)
    nurse_assignments: list["ShiftAssignment"] = field(default_factory=list)


@dataclass
class ConstraintResult:
    """
    The result of running one or more constraint checks.

    Attributes:
        ok: True if the assignment is allowed, False if blocked.
        constraint_id: Machine-readable identifier of the violated constraint;
                       matches the ``kind`` of the error raised for it.
        reason: Human-readable explanation of why the constraint failed.
    """

    ok: bool
    constraint_id: str = ""
    reason: str = ""

    @classmethod
    def success(cls) -> "ConstraintResult":
        """Return a passing constraint result."""
        return cls(ok=True)

    @classmethod
    def block(cls, constraint_id: str, reason: str) -> "ConstraintResult":
        """Return a result that prevents assignment."""
        return cls(ok=False, constraint_id=constraint_id, reason=reason)

    def as_error(self) -> SchedulingError:
        """Build the domain error matching this failed result."""
        return CONSTRAINT_ERRORS[self.constraint_id](self.reason)

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise self.as_error()


# ---------------------------------------------------------------------------
# Individual constraint checks
# ---------------------------------------------------------------------------


def check_nurse_eligible(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> ConstraintResult:
    """
    Only active users in the nurse role can be assigned.

    Head nurses are never assigned to shifts, even when active.
    """
    if nurse.can_be_assigned:
        return ConstraintResult.success()

    if not nurse.is_nurse:
        reason = f"{nurse.get_full_name()} is a {nurse.get_role_display()}; shifts can only be assigned to nurses."
    else:
        reason = f"{nurse.get_full_name()} is inactive and cannot receive new assignments."
    return ConstraintResult.block(constraint_id="inactive_nurse", reason=reason)


def check_not_already_assigned(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> ConstraintResult:
    """Block a second record linking the same nurse to the same shift, whatever its status."""
    already_linked = any(a.user_id == nurse.pk for a in snapshot.shift_assignments) or any(
        shift.pk is not None and a.shift_id == shift.pk for a in snapshot.nurse_assignments
    )
    if not already_linked:
        return ConstraintResult.success()

    return ConstraintResult.block(
        constraint_id="duplicate_assignment",
        reason=f"{nurse.get_full_name()} is already assigned to this shift.",
    )


def check_capacity(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> ConstraintResult:
    """
    Block when every slot on the shift is held.

    On-leave assignments have vacated their slot and are not counted.
    """
    if not capacity.is_full(shift, snapshot.shift_assignments):
        return ConstraintResult.success()

    return ConstraintResult.block(
        constraint_id="shift_full",
        reason=(
            f"Shift is already full ({shift.required_nurses} of "
            f"{shift.required_nurses} nurse(s) assigned)."
        ),
    )


def check_no_double_booking(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> ConstraintResult:
    """
    Ensure the nurse has no overlapping active assignment on the same calendar date.

    Overlap is half-open: a shift ending at 16:00 does not collide with one
    starting at 16:00. Times are compared on the shift's own date only; no
    rollover into the next day is performed here.
    """
    for assignment in snapshot.nurse_assignments:
        if shift.pk is not None and assignment.shift_id == shift.pk:
            continue  # The record for this exact shift, if any
        if not assignment.is_active:
            continue
        other = assignment.shift
        if other.date != shift.date:
            continue
        if intervals.overlaps(shift.start_time, shift.end_time, other.start_time, other.end_time):
            return ConstraintResult.block(
                constraint_id="schedule_conflict",
                reason=(
                    f"{nurse.get_full_name()} is already assigned to a shift in "
                    f"{other.department} from {other.start_time:%H:%M} to "
                    f"{other.end_time:%H:%M} on {other.date:%Y-%m-%d}, "
                    f"which overlaps with this shift."
                ),
            )
    return ConstraintResult.success()


# ---------------------------------------------------------------------------
# Constraint pipeline
# ---------------------------------------------------------------------------

# Ordered: identity checks are cheap and run before the overlap scan.
CONSTRAINT_PIPELINE = [
    check_nurse_eligible,
    check_not_already_assigned,
    check_capacity,
    check_no_double_booking,
]


class ConstraintEngine:
    """
    Entry point for all assignment constraint checks.

    Usage:
        result = ConstraintEngine.check(nurse, shift, snapshot)
        # Returns the first failing result, or success.

        all_results = ConstraintEngine.check_all(nurse, shift, snapshot)
        # Returns every failing result (for "what-if" projections).
    """

    @staticmethod
    def check(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> ConstraintResult:
        """
        Run the pipeline and return the first failing result, or success.

        Args:
            nurse: The user being considered for assignment.
            shift: The target shift.
            snapshot: Existing assignments for the shift and for the nurse.

        Returns:
            ConstraintResult.
        """
        for check_fn in CONSTRAINT_PIPELINE:
            result = check_fn(nurse, shift, snapshot)
            if not result.ok:
                logger.info(
                    "Constraint failed: %s for user=%s shift=%s: %s",
                    result.constraint_id,
                    nurse.pk,
                    shift.pk,
                    result.reason,
                )
                return result
        return ConstraintResult.success()

    @staticmethod
    def check_all(nurse: "User", shift: "Shift", snapshot: AssignmentSnapshot) -> list[ConstraintResult]:
        """
        Run every constraint without short-circuiting.

        Returns:
            List of failing ConstraintResults. Empty list means all clear.
        """
        results = []
        for check_fn in CONSTRAINT_PIPELINE:
            result = check_fn(nurse, shift, snapshot)
            if not result.ok:
                results.append(result)
        return results


def propose_assignment(
    nurse: "User",
    shift: "Shift",
    snapshot: AssignmentSnapshot,
    assigned_by: "User",
    notes: str = "",
) -> "ShiftAssignment":
    """
    Validate a (nurse, shift) pairing and build the resulting assignment.

    The returned ShiftAssignment is unsaved and in ASSIGNED status; neither the
    shift nor any existing assignment is modified.

    Raises:
        InactiveNurse, DuplicateAssignment, ShiftFull, ScheduleConflict
    """
    from apps.scheduling.models import ShiftAssignment

    ConstraintEngine.check(nurse, shift, snapshot).raise_for_failure()
    return ShiftAssignment(
        shift=shift,
        user=nurse,
        status=ShiftAssignment.Status.ASSIGNED,
        assigned_by=assigned_by,
        notes=notes or "",
    )
