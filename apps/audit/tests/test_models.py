from django.test import TestCase
from apps.accounts.models import User
from apps.audit.models import AuditLog


class TestAuditLogModel(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="audit@example.com",
            password="pass123",
            name="Audit Tester",
            role=User.Role.HEAD_NURSE,
        )

    def test_audit_log_creation_and_str(self):
        log = AuditLog.objects.create(
            actor=self.user,
            action="shift.created",
            after={"id": 1},
        )
        self.assertIn("shift.created", str(log))
        self.assertIn("Audit Tester", str(log))
        self.assertEqual(log.before, {})

    def test_system_actor(self):
        log = AuditLog.objects.create(action="leave_request.created")
        self.assertIn("System", str(log))

    def test_audit_log_is_immutable(self):
        log = AuditLog.objects.create(
            actor=self.user,
            action="shift_assignment.updated",
            before={"status": "assigned"},
            after={"status": "completed"},
        )
        log.action = "shift_assignment.deleted"
        with self.assertRaises(RuntimeError):
            log.save()
        with self.assertRaises(RuntimeError):
            log.delete()
        log.refresh_from_db()
        self.assertEqual(log.action, "shift_assignment.updated")

    def test_actor_removal_keeps_history(self):
        AuditLog.objects.create(actor=self.user, action="shift.deleted")
        self.user.delete()
        self.assertIsNone(AuditLog.objects.get(action="shift.deleted").actor)
