"""
Service objects for the WardRoster write path.

Responsibilities:
  - Load the rows an operation depends on under SELECT FOR UPDATE
  - Run the pure constraint / state-machine logic on that snapshot
  - Persist the outcome (plus its audit record) in the same transaction
  - Translate database failures into domain errors

Callers pass an already-authenticated actor; role checks happen once in the
view layer (core.permissions).
"""

import logging
from datetime import date, time
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_time

from apps.accounts.models import User
from apps.audit.models import AuditLog
from apps.notifications.models import Notification
from apps.notifications.services import notify
from apps.scheduling import capacity, intervals, leave
from apps.scheduling.constraints import AssignmentSnapshot, check_no_double_booking, propose_assignment
from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment
from apps.scheduling.schedule import (
    ScheduleView,
    build_schedule,
    current_month_range,
    upcoming_assignments,
    week_range,
)
from apps.scheduling.serializers import serialize_shift
from core.clock import facility_today
from core.db import translate_db_errors
from core.exceptions import (
    ConflictError,
    DuplicateActiveRequest,
    DuplicateAssignment,
    InvalidTransition,
    NotFoundError,
    ShiftConflict,
    ValidationError,
)
from core.http import parse_id

logger = logging.getLogger(__name__)


def _get_or_404(queryset, pk, label: str):
    if pk in (None, ""):
        raise NotFoundError(f"{label} not found.")
    obj = queryset.filter(pk=parse_id(pk, f"{label} ID")).first()
    if obj is None:
        raise NotFoundError(f"{label} not found.")
    return obj


def _parse_date(value, field_name: str) -> date:
    try:
        parsed = value if isinstance(value, date) else parse_date(str(value or ""))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format.")
    return parsed


def _parse_time(value, field_name: str) -> time:
    try:
        parsed = value if isinstance(value, time) else parse_time(str(value or ""))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field_name} must be a time in HH:MM format.")
    return parsed


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------


class ShiftService:
    """
    Create, update and delete shifts (head nurse only).

    Clashes are checked per department: two wards may run shifts of the same
    category at the same time on the same date, but one department may not.
    """

    REQUIRED_FIELDS = ("date", "start_time", "end_time", "shift_type")
    EDITABLE_FIELDS = REQUIRED_FIELDS + ("required_nurses", "department")

    @classmethod
    def _clean(cls, data: dict, partial: bool = False) -> dict:
        """Validate and coerce raw shift fields."""
        if not partial:
            missing = [f for f in cls.REQUIRED_FIELDS if not data.get(f)]
            if missing:
                raise ValidationError("Date, start_time, end_time, and shift_type are required.")

        cleaned = {}
        for name in cls.EDITABLE_FIELDS:
            if name not in data or data[name] is None:
                continue
            value = data[name]
            if name == "date":
                value = _parse_date(value, "date")
            elif name in ("start_time", "end_time"):
                value = _parse_time(value, name)
            elif name == "shift_type":
                if value not in Shift.Type.values:
                    raise ValidationError("Shift type must be morning, afternoon, or night.")
            elif name == "required_nurses":
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValidationError("Required nurses must be a whole number.")
                if value < 1:
                    raise ValidationError("Required nurses must be at least 1.")
            elif name == "department":
                if not isinstance(value, str):
                    raise ValidationError("Department must be a string.")
                value = value.strip() or settings.WARDROSTER["DEFAULT_DEPARTMENT"]
            cleaned[name] = value

        return cleaned

    @staticmethod
    def _check_no_clashing_shift(shift: Shift) -> None:
        """
        Reject a shift that clashes with another in the same department and date.

        Two shifts clash when they share a category or their times overlap.
        """
        if shift.start_time == shift.end_time:
            raise ValidationError("Shift start and end times must differ.")
        siblings = Shift.objects.filter(date=shift.date, department=shift.department).exclude(pk=shift.pk)
        for other in siblings:
            same_type = other.shift_type == shift.shift_type
            if same_type or intervals.overlaps(shift.start_time, shift.end_time, other.start_time, other.end_time):
                raise ShiftConflict(
                    f"A {other.get_shift_type_display().lower()} shift already exists in "
                    f"{shift.department} on {shift.date:%Y-%m-%d} "
                    f"({other.start_time:%H:%M}–{other.end_time:%H:%M})."
                )

    @classmethod
    @translate_db_errors
    @transaction.atomic
    def create(cls, actor: User, data: dict) -> Shift:
        cleaned = cls._clean(data)
        shift = Shift(created_by=actor, **cleaned)
        cls._check_no_clashing_shift(shift)
        shift.save()
        AuditLog.objects.create(
            actor=actor,
            action="shift.created",
            content_object=shift,
            after=serialize_shift(shift),
        )
        logger.info("Head nurse %s created shift %s", actor.pk, shift.pk)
        return shift

    @classmethod
    @translate_db_errors
    @transaction.atomic
    def update(cls, actor: User, shift_id, data: dict) -> Shift:
        """
        Apply a partial update to a shift.

        Capacity may not drop below the slots already held, and moving the
        shift may not double-book any of its active nurses.
        """
        shift = _get_or_404(Shift.objects.select_for_update(), shift_id, "Shift")
        before = serialize_shift(shift)
        cleaned = cls._clean(data, partial=True)
        for name, value in cleaned.items():
            setattr(shift, name, value)

        assignments = list(ShiftAssignment.objects.select_for_update().filter(shift=shift))
        held = capacity.occupied_slots(assignments)
        if shift.required_nurses < held:
            raise ConflictError(
                f"Cannot reduce required nurses to {shift.required_nurses}; "
                f"{held} nurse(s) are already assigned."
            )

        if {"date", "start_time", "end_time", "shift_type", "department"} & cleaned.keys():
            cls._check_no_clashing_shift(shift)

        if {"date", "start_time", "end_time"} & cleaned.keys():
            for assignment in assignments:
                if not assignment.is_active:
                    continue
                nurse = User.objects.select_for_update().get(pk=assignment.user_id)
                nurse_assignments = list(
                    ShiftAssignment.objects.select_for_update(of=("self",))
                    .filter(user=nurse)
                    .select_related("shift")
                )
                result = check_no_double_booking(
                    nurse, shift, AssignmentSnapshot(nurse_assignments=nurse_assignments)
                )
                result.raise_for_failure()

        shift.save()
        AuditLog.objects.create(
            actor=actor,
            action="shift.updated",
            content_object=shift,
            before=before,
            after=serialize_shift(shift),
        )
        return shift

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def delete(actor: User, shift_id) -> None:
        shift = _get_or_404(Shift.objects.select_for_update(), shift_id, "Shift")
        AuditLog.objects.create(
            actor=actor,
            action="shift.deleted",
            before=serialize_shift(shift),
            note=str(shift),
        )
        shift.delete()
        logger.info("Head nurse %s deleted shift %s", actor.pk, shift_id)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


class ShiftAssignmentService:
    """
    Service object for assigning nurses to shifts.

    Responsibilities:
      - Run constraint checks before assignment
      - Handle transaction safety with SELECT FOR UPDATE
      - Raise structured domain errors on conflict
    """

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def propose(actor: User, nurse_id, shift_id, notes: str = "") -> ShiftAssignment:
        """
        Attempt to assign a nurse to a shift.

        The nurse row, the shift row and both sets of assignment rows are
        locked before the snapshot is read. Two concurrent proposals for the
        last slot cannot both succeed, and neither can two proposals that
        would double-book the same nurse on different shifts.

        Args:
            actor: The head nurse performing the assignment.
            nurse_id: PK of the nurse being assigned.
            shift_id: PK of the shift.
            notes: Free-text notes stored on the assignment.

        Returns:
            The persisted ShiftAssignment in ASSIGNED status.

        Raises:
            NotFoundError, InactiveNurse, DuplicateAssignment, ShiftFull, ScheduleConflict
        """
        if nurse_id in (None, "") or shift_id in (None, ""):
            raise ValidationError("User ID and shift ID are required.")

        # The nurse row serialises concurrent proposals for the same nurse
        nurse = _get_or_404(User.objects.select_for_update(), nurse_id, "User")
        shift = _get_or_404(Shift.objects.select_for_update(), shift_id, "Shift")

        snapshot = AssignmentSnapshot(
            shift_assignments=list(ShiftAssignment.objects.select_for_update().filter(shift=shift)),
            nurse_assignments=list(
                ShiftAssignment.objects.select_for_update(of=("self",))
                .filter(user=nurse)
                .select_related("shift")
            ),
        )
        assignment = propose_assignment(nurse, shift, snapshot, assigned_by=actor, notes=notes)

        try:
            with transaction.atomic():
                assignment.save()
        except IntegrityError as exc:
            # Unique (shift, user) backstop for a racing duplicate insert
            raise DuplicateAssignment() from exc

        logger.info("Head nurse %s assigned user %s to shift %s", actor.pk, nurse.pk, shift.pk)
        return assignment

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def update_status(actor: User, assignment_id, status: Optional[str] = None, notes: Optional[str] = None) -> ShiftAssignment:
        """
        Manually mark an assignment completed and/or change its notes.

        ON_LEAVE is never set here; it is only reachable through leave approval.

        Raises:
            NotFoundError, ValidationError, InvalidTransition
        """
        assignment = _get_or_404(
            ShiftAssignment.objects.select_for_update(of=("self",)).select_related("shift", "user"),
            assignment_id,
            "Assignment",
        )
        before = {"status": assignment.status, "notes": assignment.notes}
        update_fields = ["updated_at"]

        if status is not None and status != assignment.status:
            if status == ShiftAssignment.Status.ON_LEAVE:
                raise ValidationError("on_leave can only be set by approving a leave request.")
            if status not in ShiftAssignment.Status.values:
                raise ValidationError("Status must be assigned or completed.")
            if not (
                assignment.status == ShiftAssignment.Status.ASSIGNED
                and status == ShiftAssignment.Status.COMPLETED
            ):
                raise InvalidTransition(
                    f"Cannot change an assignment from {assignment.status} to {status}."
                )
            assignment.status = status
            update_fields.append("status")

        if notes is not None:
            assignment.notes = notes
            update_fields.append("notes")

        assignment.save(update_fields=update_fields)
        AuditLog.objects.create(
            actor=actor,
            action="shift_assignment.updated",
            content_object=assignment,
            before=before,
            after={"status": assignment.status, "notes": assignment.notes},
        )
        return assignment

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def remove(actor: User, assignment_id) -> None:
        """Delete an assignment together with its leave request history."""
        assignment = _get_or_404(
            ShiftAssignment.objects.select_for_update(of=("self",)).select_related("shift", "user"),
            assignment_id,
            "Assignment",
        )
        AuditLog.objects.create(
            actor=actor,
            action="shift_assignment.deleted",
            before={"shift": assignment.shift_id, "user": assignment.user_id, "status": assignment.status},
        )
        notify(
            recipient=assignment.user,
            notification_type=Notification.Type.ASSIGNMENT_REMOVED,
            title="Shift assignment removed",
            body=f"You are no longer assigned to {assignment.shift}.",
            data={"shift_id": assignment.shift_id},
        )
        assignment.delete()


# ---------------------------------------------------------------------------
# Leave requests
# ---------------------------------------------------------------------------


class LeaveRequestService:
    """Persist transitions of the leave request state machine (see leave.py)."""

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def submit(actor: User, assignment_id, reason: str) -> LeaveRequest:
        """
        File a pending leave request for one of the actor's assignments.

        Raises:
            ValidationError, NotFoundError, NotOwner, ShiftNotFuture, DuplicateActiveRequest
        """
        if assignment_id in (None, "") or not reason:
            raise ValidationError("Shift assignment ID and reason are required.")

        assignment = _get_or_404(
            ShiftAssignment.objects.select_for_update(of=("self",)).select_related("shift"),
            assignment_id,
            "Shift assignment",
        )
        request = leave.submit(
            assignment,
            requester=actor,
            reason=reason,
            existing_requests=list(assignment.leave_requests.all()),
            today=facility_today(),
        )
        try:
            with transaction.atomic():
                request.save()
        except IntegrityError as exc:
            # Partial unique index on active requests per assignment
            raise DuplicateActiveRequest() from exc

        logger.info("User %s requested leave for assignment %s", actor.pk, assignment.pk)
        return request

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def resolve(actor: User, request_id, decision: str, admin_notes: Optional[str] = None) -> LeaveRequest:
        """
        Approve or reject a pending leave request.

        The request row and its assignment row are both locked; on approval the
        two updates commit together.

        Raises:
            ValidationError, NotFoundError, AlreadyProcessed
        """
        request = _get_or_404(
            LeaveRequest.objects.select_for_update(), request_id, "Leave request"
        )
        request.assignment = (
            ShiftAssignment.objects.select_for_update(of=("self",))
            .select_related("shift", "user")
            .get(pk=request.assignment_id)
        )
        before = {"status": request.status, "assignment_status": request.assignment.status}

        leave.resolve(request, approver=actor, decision=decision, now=timezone.now(), admin_notes=admin_notes)

        request.save(update_fields=["status", "approved_by", "approved_at", "admin_notes", "updated_at"])
        if request.status == LeaveRequest.Status.APPROVED:
            request.assignment.save(update_fields=["status", "updated_at"])

        AuditLog.objects.create(
            actor=actor,
            action=f"leave_request.{request.status}",
            content_object=request,
            before=before,
            after={"status": request.status, "assignment_status": request.assignment.status},
            note=request.admin_notes,
        )

        approved = request.status == LeaveRequest.Status.APPROVED
        notify(
            recipient=request.requested_by,
            notification_type=(
                Notification.Type.LEAVE_APPROVED if approved else Notification.Type.LEAVE_REJECTED
            ),
            title=f"Your leave request was {request.status}",
            body=(
                f"Your leave request for {request.assignment.shift} was {request.status}"
                f" by {actor.get_full_name()}."
                + (f" Note: {request.admin_notes}" if request.admin_notes else "")
            ),
            data={"leave_request_id": request.pk, "assignment_id": request.assignment_id},
        )
        return request

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def cancel(actor: User, request_id) -> None:
        """Withdraw a pending request. The row is deleted."""
        request = _get_or_404(LeaveRequest.objects.select_for_update(), request_id, "Leave request")
        leave.cancel(request, actor)
        AuditLog.objects.create(
            actor=actor,
            action="leave_request.cancelled",
            before={"assignment": request.assignment_id, "status": request.status, "reason": request.reason},
        )
        request.delete()

    @staticmethod
    @translate_db_errors
    @transaction.atomic
    def edit(actor: User, request_id, reason: str) -> LeaveRequest:
        request = _get_or_404(LeaveRequest.objects.select_for_update(), request_id, "Leave request")
        leave.edit(request, actor, reason)
        request.save(update_fields=["reason", "updated_at"])
        return request


# ---------------------------------------------------------------------------
# Read side
# ---------------------------------------------------------------------------


class ScheduleService:
    """Nurse-facing schedule queries."""

    @staticmethod
    def _assignments_for(nurse_id):
        return (
            ShiftAssignment.objects.filter(user_id=nurse_id)
            .select_related("shift")
            .order_by("shift__date", "shift__start_time")
        )

    @classmethod
    @translate_db_errors
    def get_nurse_schedule(cls, nurse_id, start_date=None, end_date=None, status: Optional[str] = None) -> ScheduleView:
        """
        Build the schedule view for a nurse.

        When either bound is missing the current month (facility timezone) is used.
        """
        if start_date and end_date:
            start = _parse_date(start_date, "start_date")
            end = _parse_date(end_date, "end_date")
        else:
            start, end = current_month_range(facility_today())

        if start > end:
            raise ValidationError("start_date must be on or before end_date.")
        if status and status not in ShiftAssignment.Status.values:
            raise ValidationError("Status must be assigned, completed, or on_leave.")

        assignments = cls._assignments_for(nurse_id).filter(shift__date__gte=start, shift__date__lte=end)
        return build_schedule(list(assignments), start, end, status=status or None)

    @classmethod
    @translate_db_errors
    def get_upcoming(cls, nurse_id, limit=None) -> list[ShiftAssignment]:
        try:
            limit = int(limit) if limit not in (None, "") else settings.WARDROSTER["UPCOMING_SHIFTS_LIMIT"]
        except (TypeError, ValueError):
            raise ValidationError("limit must be a whole number.")
        if limit < 1:
            raise ValidationError("limit must be at least 1.")

        today = facility_today()
        assignments = cls._assignments_for(nurse_id).filter(
            shift__date__gte=today, status=ShiftAssignment.Status.ASSIGNED
        )
        return upcoming_assignments(list(assignments), today, limit)

    @classmethod
    @translate_db_errors
    def get_today(cls, nurse_id) -> ScheduleView:
        """Assigned and completed shifts dated today; on-leave ones are left out."""
        today = facility_today()
        assignments = [
            a for a in cls._assignments_for(nurse_id).filter(shift__date=today) if a.is_active
        ]
        return build_schedule(assignments, today, today)

    @classmethod
    @translate_db_errors
    def get_week(cls, nurse_id) -> ScheduleView:
        """The Sunday-to-Saturday week containing today."""
        start, end = week_range(facility_today())
        assignments = cls._assignments_for(nurse_id).filter(shift__date__gte=start, shift__date__lte=end)
        return build_schedule(list(assignments), start, end)
