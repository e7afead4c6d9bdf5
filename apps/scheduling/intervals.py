"""
Time-of-day interval helpers for WardRoster shifts.

Shifts store a calendar date plus local start/end times. An end time earlier
than the start time marks an overnight shift that finishes the following day.

overlaps() compares two ranges on a shared reference day and performs no
rollover handling; duration() is the only place overnight ranges are unrolled.
Neither function validates its inputs: times are parsed upstream.
"""

from datetime import date, datetime, time, timedelta

# Arbitrary anchor day used to turn time-of-day values into comparable datetimes
_REFERENCE_DAY = date(2000, 1, 1)


def overlaps(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """
    Return True if two half-open [start, end) ranges overlap.

    Ranges that merely touch at an endpoint do not overlap, so a 08:00-16:00
    shift and a 16:00-00:00 shift can be worked back to back.
    """
    return start_a < end_b and start_b < end_a


def duration(start: time, end: time) -> float:
    """
    Return the length of a shift in decimal hours.

    If ``end`` is before ``start`` the shift runs overnight and ``end`` is
    taken to be on the following day: duration(22:00, 06:00) == 8.0.
    """
    start_dt = datetime.combine(_REFERENCE_DAY, start)
    end_dt = datetime.combine(_REFERENCE_DAY, end)
    if end_dt < start_dt:
        end_dt += timedelta(days=1)
    return (end_dt - start_dt).total_seconds() / 3600


def is_overnight(start: time, end: time) -> bool:
    """Return True if the range crosses midnight."""
    return end < start
