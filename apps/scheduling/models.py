"""
Scheduling models for WardRoster.

The core of the platform. Defines:
  - Shift: a dated block of work in a department requiring a number of nurses
  - ShiftAssignment: links one nurse to one shift
  - LeaveRequest: the state machine for a nurse asking to be excused from an assignment

Shift times are facility-local times of day attached to a calendar date.
Audit timestamps are stored as UTC (USE_TZ=True).
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.scheduling import intervals


def default_department() -> str:
    return settings.WARDROSTER["DEFAULT_DEPARTMENT"]


class Shift(models.Model):
    """
    A scheduled block of work on a given date.

    A shift specifies WHEN (date + start/end time), WHERE (department) and
    HOW MANY nurses are required. Individual nurses are attached via
    ShiftAssignment.

    Overnight shifts (e.g., 22:00–06:00) are stored with end_time < start_time
    on the date the shift starts.

    shift_type is informational; it is never re-derived from the times.
    """

    class Type(models.TextChoices):
        MORNING = "morning", _("Morning")
        AFTERNOON = "afternoon", _("Afternoon")
        NIGHT = "night", _("Night")

    date = models.DateField(help_text="Calendar day the shift starts on.")
    start_time = models.TimeField()
    end_time = models.TimeField(help_text="May be earlier than start_time for overnight shifts.")
    shift_type = models.CharField(max_length=20, choices=Type.choices)
    required_nurses = models.PositiveSmallIntegerField(
        default=1,
        help_text="Number of nurses required for this shift.",
    )
    department = models.CharField(max_length=100, default=default_department)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="created_shifts",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Shift"
        verbose_name_plural = "Shifts"
        ordering = ["date", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(required_nurses__gte=1),
                name="shift_requires_at_least_one_nurse",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "start_time"], name="shift_date_start_idx"),
            models.Index(fields=["department", "date"], name="shift_department_date_idx"),
        ]

    def __str__(self) -> str:
        """Return a human-readable shift description."""
        return (
            f"{self.department} | {self.get_shift_type_display()} | {self.date:%Y-%m-%d} "
            f"{self.start_time:%H:%M}–{self.end_time:%H:%M}"
        )

    @property
    def duration_hours(self) -> float:
        """Calculate the total duration of the shift in decimal hours."""
        return intervals.duration(self.start_time, self.end_time)

    @property
    def is_overnight(self) -> bool:
        """Return True if the shift ends on the following day."""
        return intervals.is_overnight(self.start_time, self.end_time)


class ShiftAssignment(models.Model):
    """
    Links a nurse to a shift they are assigned to work.

    Status machine:
      ASSIGNED → COMPLETED (set manually by a head nurse)
      ASSIGNED → ON_LEAVE  (only as a side effect of an approved leave request)

    ON_LEAVE assignments no longer hold a slot on the shift and are ignored by
    the double-booking check.
    """

    class Status(models.TextChoices):
        ASSIGNED = "assigned", _("Assigned")
        COMPLETED = "completed", _("Completed")
        ON_LEAVE = "on_leave", _("On Leave")

    shift = models.ForeignKey(Shift, on_delete=models.CASCADE, related_name="assignments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="shift_assignments",
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ASSIGNED)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="assignments_made",
    )
    notes = models.TextField(blank=True)
    assigned_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Shift Assignment"
        verbose_name_plural = "Shift Assignments"
        ordering = ["shift__date", "shift__start_time"]
        constraints = [
            # A nurse can be linked to a given shift at most once
            models.UniqueConstraint(
                fields=["shift", "user"],
                name="unique_assignment_per_shift",
            )
        ]
        indexes = [
            models.Index(fields=["user", "shift"], name="assignment_user_shift_idx"),
            models.Index(fields=["status"], name="assignment_status_idx"),
        ]

    def __str__(self) -> str:
        """Return a readable description of this assignment."""
        return f"{self.user.get_full_name()} → {self.shift} [{self.get_status_display()}]"

    @property
    def is_active(self) -> bool:
        """Return True if this assignment holds a slot (assigned or completed)."""
        return self.status != self.Status.ON_LEAVE


class LeaveRequest(models.Model):
    """
    A nurse's request to be excused from one of their assignments.

    State machine:
      PENDING → APPROVED (head nurse approves; assignment becomes ON_LEAVE)
      PENDING → REJECTED (head nurse rejects; assignment untouched)

    APPROVED and REJECTED are terminal. Only PENDING requests can be edited or
    cancelled (cancellation deletes the row). At most one active (pending or
    approved) request may exist per assignment; rejected ones accumulate.

    Transitions live in apps.scheduling.leave; persistence in services.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    ACTIVE_STATUSES = (Status.PENDING, Status.APPROVED)

    assignment = models.ForeignKey(
        ShiftAssignment,
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    reason = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    # Filled in when a head nurse resolves the request
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="leave_reviews",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Leave Request"
        verbose_name_plural = "Leave Requests"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["assignment"],
                condition=models.Q(status__in=["pending", "approved"]),
                name="unique_active_leave_request_per_assignment",
            )
        ]
        indexes = [
            models.Index(fields=["status"], name="leave_status_idx"),
            models.Index(fields=["requested_by", "status"], name="leave_requester_status_idx"),
        ]

    def __str__(self) -> str:
        """Return a readable description of this leave request."""
        return f"{self.requested_by.get_short_name()} | {self.assignment.shift} | {self.get_status_display()}"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    @property
    def is_active(self) -> bool:
        """Return True if this request blocks a new request on the same assignment."""
        return self.status in self.ACTIVE_STATUSES
