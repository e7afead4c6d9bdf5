from django.core import mail
from django.test import TestCase

from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services import notify
from apps.notifications.tasks import send_notification_email


class NotificationDeliveryTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="deliver@example.com", password="pass123", name="Dee Liver")

    def test_email_sent_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            notification = notify(
                recipient=self.user,
                notification_type=Notification.Type.LEAVE_APPROVED,
                title="Your leave request was approved",
                body="Enjoy your day off.",
            )
            self.assertEqual(len(mail.outbox), 0)

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["deliver@example.com"])
        self.assertIn("approved", mail.outbox[0].subject)
        self.assertEqual(notification.data, {})

    def test_nothing_sent_without_commit(self):
        notify(self.user, Notification.Type.SHIFT_ASSIGNED, "New Shift Assigned", "Body")
        self.assertEqual(len(mail.outbox), 0)

    def test_task_tolerates_missing_notification(self):
        result = send_notification_email.apply(args=[123456]).get()
        self.assertEqual(result, {"notification_id": 123456, "sent": False})
        self.assertEqual(len(mail.outbox), 0)
