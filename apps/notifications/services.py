"""Creating notifications and queueing their email copies."""

import logging
from functools import partial

from django.db import transaction

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


def notify(recipient, notification_type: str, title: str, body: str, data: dict | None = None) -> Notification:
    """
    Persist a notification and queue its email once the transaction commits.

    Called inside the caller's transaction: if the surrounding operation rolls
    back, neither the row nor the email survives.
    """
    from apps.notifications.tasks import send_notification_email

    notification = Notification.objects.create(
        recipient=recipient,
        notification_type=notification_type,
        title=title,
        body=body,
        data=data or {},
    )
    transaction.on_commit(partial(send_notification_email.delay, notification.pk))
    logger.debug("Queued %s notification %s for user %s", notification_type, notification.pk, recipient.pk)
    return notification
