"""
Plain-dict representations of scheduling objects for the JSON API and the
audit trail. Dates are ISO formatted, times are HH:MM.
"""

from typing import Iterable, Optional

from apps.scheduling import capacity
from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment
from apps.scheduling.schedule import ScheduleView


def _user_summary(user) -> Optional[dict]:
    if user is None:
        return None
    return {"id": user.pk, "name": user.get_full_name(), "email": user.email, "role": user.role}


def serialize_shift(shift: Shift, assignments: Optional[Iterable[ShiftAssignment]] = None) -> dict:
    data = {
        "id": shift.pk,
        "date": shift.date.isoformat(),
        "start_time": shift.start_time.strftime("%H:%M"),
        "end_time": shift.end_time.strftime("%H:%M"),
        "shift_type": shift.shift_type,
        "required_nurses": shift.required_nurses,
        "department": shift.department,
    }
    if assignments is not None:
        assignments = list(assignments)
        data["assigned_count"] = capacity.occupied_slots(assignments)
        data["remaining_slots"] = capacity.remaining_slots(shift, assignments)
    return data


def serialize_assignment(assignment: ShiftAssignment, include_shift: bool = True) -> dict:
    data = {
        "id": assignment.pk,
        "shift_id": assignment.shift_id,
        "user_id": assignment.user_id,
        "status": assignment.status,
        "notes": assignment.notes,
        "assigned_by": assignment.assigned_by_id,
        "assigned_at": assignment.assigned_at.isoformat() if assignment.assigned_at else None,
    }
    if include_shift:
        data["shift"] = serialize_shift(assignment.shift)
    return data


def serialize_leave_request(request: LeaveRequest) -> dict:
    return {
        "id": request.pk,
        "shift_assignment_id": request.assignment_id,
        "requested_by": _user_summary(request.requested_by),
        "reason": request.reason,
        "status": request.status,
        "approved_by": _user_summary(request.approved_by),
        "approved_at": request.approved_at.isoformat() if request.approved_at else None,
        "admin_notes": request.admin_notes,
        "created_at": request.created_at.isoformat() if request.created_at else None,
        "shift": serialize_shift(request.assignment.shift),
    }


def serialize_schedule(view: ScheduleView) -> dict:
    summary = dict(view.summary)
    date_range = summary.pop("date_range")
    summary["date_range"] = {
        "start": date_range["start"].isoformat(),
        "end": date_range["end"].isoformat(),
    }
    return {
        "schedule": [serialize_assignment(a) for a in view.items],
        "grouped_by_date": {
            day.isoformat(): [serialize_assignment(a) for a in items]
            for day, items in view.grouped_by_date.items()
        },
        "summary": summary,
    }
