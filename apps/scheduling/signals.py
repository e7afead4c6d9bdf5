from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.accounts.models import User
from apps.audit.models import AuditLog
from apps.notifications.models import Notification
from apps.notifications.services import notify
from apps.scheduling.models import LeaveRequest, ShiftAssignment


@receiver(post_save, sender=ShiftAssignment)
def log_assignment(sender, instance, created, **kwargs):
    """Create audit log and notification when a shift assignment is made."""
    if created:
        AuditLog.objects.create(
            actor=instance.assigned_by,
            action="shift_assignment.created",
            content_object=instance,
            after={"shift": instance.shift_id, "user": instance.user_id, "status": instance.status},
        )

        notify(
            recipient=instance.user,
            notification_type=Notification.Type.SHIFT_ASSIGNED,
            title="New Shift Assigned",
            body=f"You have been assigned to {instance.shift}",
            data={"shift_id": instance.shift_id, "assignment_id": instance.pk},
        )


@receiver(post_save, sender=LeaveRequest)
def log_leave_request(sender, instance, created, **kwargs):
    """Audit a new leave request and tell every active head nurse about it."""
    if created:
        AuditLog.objects.create(
            actor=instance.requested_by,
            action="leave_request.created",
            content_object=instance,
            after={"assignment": instance.assignment_id, "status": instance.status, "reason": instance.reason},
        )

        requester_name = instance.requested_by.get_full_name()
        for head_nurse in User.objects.active_head_nurses():
            notify(
                recipient=head_nurse,
                notification_type=Notification.Type.LEAVE_REQUESTED,
                title="Leave Request Awaiting Review",
                body=f"{requester_name} requested leave for {instance.assignment.shift}: {instance.reason}",
                data={"leave_request_id": instance.pk, "assignment_id": instance.assignment_id},
            )
