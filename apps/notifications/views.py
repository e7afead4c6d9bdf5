"""
Notifications views for WardRoster.

View inventory:
  NotificationListView → GET: the current user's notifications, newest first
  MarkReadView         → POST: mark one or all notifications read
"""

import logging

from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views import View

from apps.notifications.models import Notification
from core.http import parse_id, parse_json_body
from core.permissions import StaffRequiredMixin

logger = logging.getLogger(__name__)


class NotificationListView(StaffRequiredMixin, View):
    """Notification inbox for the current user."""

    def get(self, request: HttpRequest) -> JsonResponse:
        qs = Notification.objects.filter(recipient=request.user).order_by("-created_at")

        # Count on the full queryset before slicing
        unread_count = qs.filter(is_read=False).count()
        if request.GET.get("unread") in ("1", "true"):
            qs = qs.filter(is_read=False)

        return JsonResponse({
            "notifications": [n.as_dict() for n in qs[:50]],
            "unread_count": unread_count,
        })


class MarkReadView(StaffRequiredMixin, View):
    """
    Mark one or all notifications as read.

    Body:
      notification_id: int   → mark a single notification
                       "all" → mark every unread notification
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)
        notification_id = data.get("notification_id", "")

        if notification_id == "all":
            updated = Notification.objects.filter(
                recipient=request.user, is_read=False
            ).update(is_read=True, read_at=timezone.now())
            logger.info("User %d marked all notifications read", request.user.pk)
        elif notification_id:
            updated = Notification.objects.filter(
                pk=parse_id(notification_id, "notification_id"), recipient=request.user, is_read=False
            ).update(is_read=True, read_at=timezone.now())
        else:
            updated = 0

        unread_count = Notification.objects.filter(recipient=request.user, is_read=False).count()
        return JsonResponse({"updated": updated, "unread_count": unread_count})
