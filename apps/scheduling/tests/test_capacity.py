from django.test import SimpleTestCase

from apps.scheduling.capacity import is_full, occupied_slots, remaining_slots
from apps.scheduling.models import ShiftAssignment

from .factories import build_assignment, build_shift, build_user


class CapacityTests(SimpleTestCase):

    def setUp(self):
        self.shift = build_shift(required_nurses=2)

    def test_empty_shift_has_every_slot_open(self):
        self.assertEqual(remaining_slots(self.shift, []), 2)
        self.assertFalse(is_full(self.shift, []))

    def test_assigned_and_completed_hold_slots(self):
        assignments = [
            build_assignment(build_user(), self.shift),
            build_assignment(build_user(), self.shift, status=ShiftAssignment.Status.COMPLETED),
        ]
        self.assertEqual(occupied_slots(assignments), 2)
        self.assertTrue(is_full(self.shift, assignments))

    def test_on_leave_vacates_its_slot(self):
        assignments = [
            build_assignment(build_user(), self.shift),
            build_assignment(build_user(), self.shift, status=ShiftAssignment.Status.ON_LEAVE),
        ]
        self.assertEqual(occupied_slots(assignments), 1)
        self.assertEqual(remaining_slots(self.shift, assignments), 1)

    def test_remaining_never_negative(self):
        """Overfilled legacy data still reports zero remaining, not a negative count."""
        shift = build_shift(required_nurses=1)
        assignments = [build_assignment(build_user(), shift) for _ in range(3)]
        self.assertEqual(remaining_slots(shift, assignments), 0)
