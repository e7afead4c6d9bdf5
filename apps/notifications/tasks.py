"""
Celery tasks for WardRoster notifications.

Tasks:
  send_notification_email: emails the copy of one persisted notification to
    its recipient. Routed to the "notifications" queue.

The task is idempotent per notification: it only reads the row, so a retry
re-sends the same message and never changes state.
"""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task(
    name="notifications.send_notification_email",
    autoretry_for=(ConnectionError,),
    retry_backoff=True,
    max_retries=3,
)
def send_notification_email(notification_id: int) -> dict:
    """
    Send the email copy of a notification.

    Returns:
        Dict with the notification id and whether a message was sent.
    """
    from apps.notifications.models import Notification

    notification = (
        Notification.objects.select_related("recipient").filter(pk=notification_id).first()
    )
    if notification is None:
        logger.warning("Notification %s vanished before its email was sent.", notification_id)
        return {"notification_id": notification_id, "sent": False}

    sent = send_mail(
        subject=f"[WardRoster] {notification.title}",
        message=notification.body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[notification.recipient.email],
    )
    logger.info("Emailed notification %s to user %s", notification.pk, notification.recipient_id)
    return {"notification_id": notification_id, "sent": bool(sent)}
