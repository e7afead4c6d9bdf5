"""
Audit trail models for WardRoster.

Every roster change is logged immutably: who did what, when, and the
before/after state. Entries are written in the same transaction as the change
they describe, so a change never exists without its audit record.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class AuditLog(models.Model):
    """
    Immutable record of a roster change.

    Action strings follow the pattern "model.event":
      - "shift.created" / "shift.updated" / "shift.deleted"
      - "shift_assignment.created" / "shift_assignment.updated" / "shift_assignment.deleted"
      - "leave_request.created" / "leave_request.approved" / "leave_request.rejected"
      - "leave_request.cancelled"
    """

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="audit_actions",
    )
    action = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Dot-separated action identifier, e.g., 'leave_request.approved'",
    )

    # Generic FK to the changed object; empty once the object is deleted
    content_type = models.ForeignKey(ContentType, on_delete=models.SET_NULL, null=True, blank=True)
    object_id = models.PositiveBigIntegerField(null=True, blank=True)
    content_object = GenericForeignKey("content_type", "object_id")

    before = models.JSONField(
        default=dict,
        blank=True,
        help_text="State of the object before the change. Empty for creations.",
    )
    after = models.JSONField(
        default=dict,
        blank=True,
        help_text="State of the object after the change. Empty for deletions.",
    )

    # e.g. the head nurse's note on a leave decision
    note = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Audit Log Entry"
        verbose_name_plural = "Audit Log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["content_type", "object_id"], name="audit_audit_content_1e5b3c_idx"),
            models.Index(fields=["actor", "-created_at"], name="audit_audit_actor_i_7c2d9a_idx"),
        ]

    def __str__(self) -> str:
        actor_name = self.actor.get_full_name() if self.actor else "System"
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {actor_name} → {self.action}"

    def save(self, *args, **kwargs):
        """
        Insert-only save.

        Raises:
            RuntimeError: If attempting to update an existing entry.
        """
        if self.pk:
            raise RuntimeError("AuditLog entries are immutable and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("AuditLog entries are immutable and cannot be deleted.")
