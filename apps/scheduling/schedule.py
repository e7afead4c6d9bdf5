"""
Read-side schedule aggregation for a nurse.

build_schedule() reduces a list of assignments (already ordered by shift date
and start time) into the view returned by the my-schedule endpoints. It never
touches the database and never mutates its input.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from apps.scheduling.models import ShiftAssignment


@dataclass
class ScheduleView:
    """
    Attributes:
        items: Assignments inside the range (and matching the status filter).
        grouped_by_date: date → assignments on that date, in input order.
        summary: total / completed / upcoming / on_leave counts and the date range.
    """

    items: list["ShiftAssignment"] = field(default_factory=list)
    grouped_by_date: dict[date, list["ShiftAssignment"]] = field(default_factory=dict)
    summary: dict = field(default_factory=dict)


def build_schedule(
    assignments: Iterable["ShiftAssignment"],
    start: date,
    end: date,
    status: Optional[str] = None,
) -> ScheduleView:
    """
    Filter ``assignments`` to shift dates in [start, end] and summarise them.

    The optional ``status`` filter is an exact match applied after the date
    filter. "upcoming" in the summary counts assignments still in ASSIGNED
    status.
    """
    from apps.scheduling.models import ShiftAssignment

    items = [a for a in assignments if start <= a.shift.date <= end]
    if status:
        items = [a for a in items if a.status == status]

    grouped: dict[date, list] = {}
    for assignment in items:
        grouped.setdefault(assignment.shift.date, []).append(assignment)

    def count(wanted: str) -> int:
        return sum(1 for a in items if a.status == wanted)

    summary = {
        "total": len(items),
        "completed": count(ShiftAssignment.Status.COMPLETED),
        "upcoming": count(ShiftAssignment.Status.ASSIGNED),
        "on_leave": count(ShiftAssignment.Status.ON_LEAVE),
        "date_range": {"start": start, "end": end},
    }
    return ScheduleView(items=items, grouped_by_date=grouped, summary=summary)


def current_month_range(today: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``today``."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def upcoming_assignments(
    assignments: Iterable["ShiftAssignment"],
    today: date,
    limit: int,
) -> list["ShiftAssignment"]:
    """Return up to ``limit`` ASSIGNED assignments dated today or later, soonest first."""
    from apps.scheduling.models import ShiftAssignment

    upcoming = [
        a for a in assignments
        if a.status == ShiftAssignment.Status.ASSIGNED and a.shift.date >= today
    ]
    upcoming.sort(key=lambda a: (a.shift.date, a.shift.start_time))
    return upcoming[:limit]


def week_range(today: date) -> tuple[date, date]:
    """Return the Sunday-to-Saturday week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def by_day(view: ScheduleView) -> dict[date, list["ShiftAssignment"]]:
    """Like ``view.grouped_by_date`` but with an (possibly empty) entry for every day in range."""
    start = view.summary["date_range"]["start"]
    end = view.summary["date_range"]["end"]
    days = {}
    current = start
    while current <= end:
        days[current] = view.grouped_by_date.get(current, [])
        current += timedelta(days=1)
    return days
