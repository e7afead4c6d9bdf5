"""
Notifications models for WardRoster.

All user-facing notifications are persisted here. Email delivery is simulated
by a Celery task that sends through Django's configured email backend (the
console backend outside production).
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    """
    A persisted notification for a specific user.

    Notifications are created by apps.notifications.services.notify (from
    signals and service objects, never directly by views) and delivered
    through two channels:
      1. In-app: stored here, listed at /notifications/
      2. Email (simulated): queued on commit, see tasks.py

    The `data` field stores ids of the objects the notification refers to.
    """

    class Type(models.TextChoices):
        # Nurse notifications
        SHIFT_ASSIGNED = "shift_assigned", _("Shift Assigned")
        ASSIGNMENT_REMOVED = "assignment_removed", _("Assignment Removed")
        LEAVE_APPROVED = "leave_approved", _("Leave Approved")
        LEAVE_REJECTED = "leave_rejected", _("Leave Rejected")
        # Head nurse notifications
        LEAVE_REQUESTED = "leave_requested", _("Leave Request Awaiting Review")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(max_length=30, choices=Type.choices)

    title = models.CharField(max_length=200)
    body = models.TextField()
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="notification_unread_idx"),
            models.Index(fields=["recipient", "-created_at"], name="notification_recent_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.get_notification_type_display()}] → {self.recipient.get_short_name()}"

    def mark_read(self) -> None:
        """Mark this notification as read and record the timestamp."""
        from django.utils import timezone

        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])

    def as_dict(self) -> dict:
        return {
            "id": self.pk,
            "type": self.notification_type,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat(),
        }
