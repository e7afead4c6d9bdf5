"""
Seed WardRoster with two weeks of demo roster data.

Scenarios included:
  1. Fully staffed morning shifts
  2. Understaffed night shifts (remaining slots visible in /api/shifts/)
  3. A pending leave request awaiting head nurse review
  4. An approved leave request (assignment on leave, slot reopened)
  5. An inactive nurse who cannot be assigned

Everything is created through the service layer, so the audit trail and
notifications look exactly like they would in production.

Usage:
    python manage.py seed_data
    python manage.py seed_data --reset
"""

from datetime import time, timedelta

from django.core.management.base import BaseCommand
from django.db import transaction

DEMO_PASSWORD = "WardRoster2026!"

SHIFT_PATTERN = [
    # (shift_type, start, end, required_nurses)
    ("morning", time(7, 0), time(15, 0), 2),
    ("afternoon", time(15, 0), time(23, 0), 2),
    ("night", time(23, 0), time(7, 0), 2),
]

NURSES = [
    ("Alice Wong", "alice@wardroster.local"),
    ("Bob Tanaka", "bob@wardroster.local"),
    ("Carol Mendes", "carol@wardroster.local"),
    ("David Okafor", "david@wardroster.local"),
]


class Command(BaseCommand):
    help = "Seed WardRoster with two weeks of demo roster data"

    def add_arguments(self, parser):
        parser.add_argument("--reset", action="store_true",
                            help="Delete all existing data first (DESTRUCTIVE).")
        parser.add_argument("--department", default="Medical Ward")

    def handle(self, *args, **options):
        if options["reset"]:
            self.stdout.write(self.style.WARNING("Resetting all data..."))
            self._reset_data()

        self.stdout.write("Seeding WardRoster demo data (2 weeks)...")

        with transaction.atomic():
            head_nurse = self._create_head_nurse()
            nurses = self._create_nurses()
            shifts = self._create_shifts(head_nurse, options["department"])
            assignments = self._assign(head_nurse, nurses, shifts)
            self._create_leave_requests(head_nurse, assignments)

        self.stdout.write(self.style.SUCCESS("\nSeed complete!\n"))
        self.stdout.write("=" * 55)
        self.stdout.write(f"HEAD NURSE: head@wardroster.local / {DEMO_PASSWORD}")
        self.stdout.write(f"NURSES:     alice, bob, carol, david @wardroster.local / {DEMO_PASSWORD}")
        self.stdout.write("=" * 55)

    # ------------------------------------------------------------------
    def _reset_data(self):
        from apps.accounts.models import User
        from apps.audit.models import AuditLog
        from apps.notifications.models import Notification
        from apps.scheduling.models import LeaveRequest, Shift, ShiftAssignment

        for model in [AuditLog, Notification, LeaveRequest, ShiftAssignment, Shift]:
            model.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def _create_head_nurse(self):
        from apps.accounts.models import User

        user, created = User.objects.get_or_create(
            email="head@wardroster.local",
            defaults={"name": "Hannah Reyes", "role": User.Role.HEAD_NURSE, "is_staff": True},
        )
        if created:
            user.set_password(DEMO_PASSWORD)
            user.save()
        return user

    def _create_nurses(self):
        from apps.accounts.models import User

        nurses = []
        for name, email in NURSES:
            user, created = User.objects.get_or_create(
                email=email, defaults={"name": name, "role": User.Role.NURSE}
            )
            if created:
                user.set_password(DEMO_PASSWORD)
                user.save()
            nurses.append(user)

        inactive, created = User.objects.get_or_create(
            email="erin@wardroster.local",
            defaults={"name": "Erin Walsh", "role": User.Role.NURSE, "is_active": False},
        )
        if created:
            inactive.set_password(DEMO_PASSWORD)
            inactive.save()
        return nurses

    def _create_shifts(self, head_nurse, department):
        from apps.scheduling.models import Shift
        from apps.scheduling.services import ShiftService
        from core.clock import facility_today

        start = facility_today() + timedelta(days=1)
        shifts = []
        for offset in range(14):
            day = start + timedelta(days=offset)
            for shift_type, start_time, end_time, required in SHIFT_PATTERN:
                existing = Shift.objects.filter(date=day, department=department, shift_type=shift_type).first()
                if existing:
                    shifts.append(existing)
                    continue
                shifts.append(ShiftService.create(head_nurse, {
                    "date": day,
                    "start_time": start_time,
                    "end_time": end_time,
                    "shift_type": shift_type,
                    "required_nurses": required,
                    "department": department,
                }))
        self.stdout.write(f"  {len(shifts)} shifts")
        return shifts

    def _assign(self, head_nurse, nurses, shifts):
        from apps.scheduling.services import ShiftAssignmentService
        from core.exceptions import ConflictError

        assignments = []
        for index, shift in enumerate(shifts):
            if shift.shift_type == "morning":
                crew = nurses[:2]
            elif shift.shift_type == "afternoon":
                crew = nurses[2:]
            else:
                # Nights run one nurse short on purpose
                crew = [nurses[index % len(nurses)]]
            for nurse in crew:
                try:
                    assignments.append(ShiftAssignmentService.propose(head_nurse, nurse.pk, shift.pk))
                except ConflictError:
                    continue
        self.stdout.write(f"  {len(assignments)} assignments")
        return assignments

    def _create_leave_requests(self, head_nurse, assignments):
        from apps.scheduling.services import LeaveRequestService

        if len(assignments) < 2:
            return
        pending = assignments[0]
        LeaveRequestService.submit(pending.user, pending.pk, "Family appointment")

        approved = assignments[-1]
        request = LeaveRequestService.submit(approved.user, approved.pk, "Annual leave")
        LeaveRequestService.resolve(head_nurse, request.pk, "approved", admin_notes="Enjoy the break.")
        self.stdout.write("  2 leave requests (1 pending, 1 approved)")
