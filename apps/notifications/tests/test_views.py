import json

from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import User
from apps.notifications.models import Notification


class NotificationViewTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="inbox@example.com", password="pass123", name="In Box")
        self.other = User.objects.create_user(email="other@example.com", password="pass123", name="Oth Er")
        self.first = self._notify(self.user, "First")
        self.second = self._notify(self.user, "Second")
        self._notify(self.other, "Not yours")
        self.client.force_login(self.user)

    @staticmethod
    def _notify(user, title):
        return Notification.objects.create(
            recipient=user,
            notification_type=Notification.Type.SHIFT_ASSIGNED,
            title=title,
            body="body",
        )

    def _mark(self, notification_id):
        return self.client.post(
            reverse("notifications:mark_read"),
            data=json.dumps({"notification_id": notification_id}),
            content_type="application/json",
        )

    def test_lists_only_own_notifications(self):
        response = self.client.get(reverse("notifications:list"))
        payload = response.json()
        self.assertEqual(payload["unread_count"], 2)
        self.assertEqual({n["title"] for n in payload["notifications"]}, {"First", "Second"})

    def test_mark_single_read(self):
        response = self._mark(self.first.pk)
        self.assertEqual(response.json(), {"updated": 1, "unread_count": 1})
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_read)

    def test_mark_all_read(self):
        response = self._mark("all")
        self.assertEqual(response.json()["unread_count"], 0)
        self.assertFalse(Notification.objects.filter(recipient=self.other, is_read=True).exists())

    def test_cannot_mark_someone_elses(self):
        foreign = Notification.objects.get(recipient=self.other)
        self.assertEqual(self._mark(foreign.pk).json()["updated"], 0)

    def test_malformed_id(self):
        response = self._mark("first")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "validation_error")
        self.assertEqual(Notification.objects.filter(is_read=True).count(), 0)

    def test_unread_filter(self):
        self._mark(self.first.pk)
        response = self.client.get(reverse("notifications:list"), {"unread": "1"})
        self.assertEqual([n["title"] for n in response.json()["notifications"]], ["Second"])

    def test_requires_login(self):
        self.client.logout()
        self.assertEqual(self.client.get(reverse("notifications:list")).status_code, 401)
