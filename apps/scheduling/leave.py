"""
Leave request state machine.

    PENDING ──approve──▶ APPROVED   (assignment → ON_LEAVE)
       │
       └────reject───▶ REJECTED   (assignment untouched)

Every transition here works on in-memory model instances and never saves.
The service layer loads the rows under lock, calls these functions and
persists everything in one transaction, so an approval writes the request and
its assignment together or not at all.
"""

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, Optional

from apps.scheduling.models import LeaveRequest, ShiftAssignment
from core.exceptions import (
    AlreadyProcessed,
    DuplicateActiveRequest,
    NotOwner,
    ShiftNotFuture,
    ValidationError,
)

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = logging.getLogger(__name__)

DECISIONS = (LeaveRequest.Status.APPROVED, LeaveRequest.Status.REJECTED)


def submit(
    assignment: ShiftAssignment,
    requester: "User",
    reason: str,
    existing_requests: Iterable[LeaveRequest],
    today: date,
) -> LeaveRequest:
    """
    Open a new pending leave request against ``assignment``.

    Args:
        assignment: The assignment the nurse wants to be excused from.
        requester: The acting user; must be the assigned nurse.
        reason: Free-text justification.
        existing_requests: Every leave request already filed for the assignment.
        today: Current date in the facility timezone. Only shifts dated
               strictly after today are eligible.

    Returns:
        An unsaved LeaveRequest in PENDING status.

    Raises:
        ValidationError: reason is blank.
        NotOwner: requester is not the assigned nurse.
        ShiftNotFuture: the shift is today or in the past.
        DuplicateActiveRequest: a pending or approved request already exists.
    """
    if not isinstance(reason, str) or not reason.strip():
        raise ValidationError("A reason is required to request leave.")

    if assignment.user_id != requester.pk:
        raise NotOwner("You can only request leave for your own shifts.")

    if assignment.shift.date <= today:
        raise ShiftNotFuture()

    if any(r.is_active for r in existing_requests):
        raise DuplicateActiveRequest()

    return LeaveRequest(
        assignment=assignment,
        requested_by=requester,
        reason=reason.strip(),
        status=LeaveRequest.Status.PENDING,
    )


def resolve(
    request: LeaveRequest,
    approver: "User",
    decision: str,
    now: datetime,
    admin_notes: Optional[str] = None,
) -> LeaveRequest:
    """
    Approve or reject a pending request.

    On approval the linked assignment (``request.assignment``) is moved to
    ON_LEAVE in the same call; on rejection it is left alone. Passing
    ``admin_notes=None`` keeps whatever notes are already on the request.

    Raises:
        ValidationError: decision is not "approved" or "rejected".
        AlreadyProcessed: the request is no longer pending.
    """
    if decision not in DECISIONS:
        raise ValidationError('Decision must be either "approved" or "rejected".')

    if not request.is_pending:
        raise AlreadyProcessed()

    request.status = decision
    request.approved_by = approver
    request.approved_at = now
    if admin_notes is not None:
        request.admin_notes = admin_notes

    if decision == LeaveRequest.Status.APPROVED:
        request.assignment.status = ShiftAssignment.Status.ON_LEAVE

    logger.info("Leave request %s %s by user=%s", request.pk, decision, approver.pk)
    return request


def _check_mutable_by(request: LeaveRequest, requester: "User", verb: str) -> None:
    # Head nurses may act on anyone's request; the pending-only rule still applies.
    if request.requested_by_id != requester.pk and not requester.is_head_nurse:
        raise NotOwner(f"You can only {verb} your own leave requests.")
    if not request.is_pending:
        raise AlreadyProcessed(f"Cannot {verb} processed leave requests.")


def cancel(request: LeaveRequest, requester: "User") -> None:
    """
    Validate that ``requester`` may withdraw ``request``.

    Cancellation removes the row; the caller performs the delete.
    """
    _check_mutable_by(request, requester, "cancel")


def edit(request: LeaveRequest, requester: "User", new_reason: str) -> LeaveRequest:
    """Replace the reason on a pending request. Nothing else is mutable."""
    _check_mutable_by(request, requester, "update")
    if not isinstance(new_reason, str) or not new_reason.strip():
        raise ValidationError("A reason is required.")
    request.reason = new_reason.strip()
    return request
