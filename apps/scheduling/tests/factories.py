"""
Lightweight factories for scheduling tests (no factory_boy dependency).

make_* helpers hit the database; build_* helpers return unsaved instances
with primary keys filled in, for the pure modules that never query.
"""

import itertools
from datetime import date, time, timedelta

from apps.accounts.models import User
from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment
from core.clock import facility_today

_seq = itertools.count(1)


def make_user(role=User.Role.NURSE, **kwargs) -> User:
    """Create a test user with sensible defaults."""
    n = next(_seq)
    return User.objects.create_user(
        email=kwargs.pop("email", f"user{n}@test.com"),
        password="testpass",
        name=kwargs.pop("name", f"Nurse {n}"),
        role=role,
        **kwargs,
    )


def make_head_nurse(**kwargs) -> User:
    kwargs.setdefault("name", f"Head Nurse {next(_seq)}")
    return make_user(role=User.Role.HEAD_NURSE, **kwargs)


def future_date(days: int = 7) -> date:
    return facility_today() + timedelta(days=days)


def make_shift(on=None, start="08:00", end="16:00", shift_type=Shift.Type.MORNING, **kwargs) -> Shift:
    """Create a test shift. ``start``/``end`` are HH:MM strings."""
    return Shift.objects.create(
        date=on or future_date(),
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        shift_type=shift_type,
        required_nurses=kwargs.pop("required_nurses", 1),
        department=kwargs.pop("department", "Medical Ward"),
        **kwargs,
    )


def make_assignment(user, shift, status=ShiftAssignment.Status.ASSIGNED, assigned_by=None) -> ShiftAssignment:
    return ShiftAssignment.objects.create(user=user, shift=shift, status=status, assigned_by=assigned_by)


def make_leave_request(assignment, status=LeaveRequest.Status.PENDING, reason="Family emergency") -> LeaveRequest:
    return LeaveRequest.objects.create(
        assignment=assignment,
        requested_by=assignment.user,
        reason=reason,
        status=status,
    )


# ---------------------------------------------------------------------------
# Unsaved builders
# ---------------------------------------------------------------------------


def build_user(role=User.Role.NURSE, is_active=True, **kwargs) -> User:
    n = next(_seq)
    return User(
        pk=kwargs.pop("pk", n),
        email=f"built{n}@test.com",
        name=kwargs.pop("name", f"Nurse {n}"),
        role=role,
        is_active=is_active,
        **kwargs,
    )


def build_shift(on=date(2024, 1, 15), start="08:00", end="16:00", required_nurses=1, **kwargs) -> Shift:
    return Shift(
        pk=kwargs.pop("pk", next(_seq)),
        date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        shift_type=kwargs.pop("shift_type", Shift.Type.MORNING),
        required_nurses=required_nurses,
        department=kwargs.pop("department", "Medical Ward"),
    )


def build_assignment(user, shift, status=ShiftAssignment.Status.ASSIGNED) -> ShiftAssignment:
    return ShiftAssignment(pk=next(_seq), user=user, shift=shift, status=status)
