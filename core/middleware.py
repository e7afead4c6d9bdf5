"""
Core middleware for WardRoster.

FacilityTimezoneMiddleware:
  Activates the facility timezone for each request, so dates rendered or
  computed with django.utils.timezone follow the ward's wall clock while
  storage stays in UTC.

SchedulingErrorMiddleware:
  Renders domain errors raised anywhere below the view as
  {"error": kind, "message": message} with the error's HTTP status. No stack
  trace or SQL ever reaches the client.
"""

import logging

from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.utils import timezone

from core.clock import facility_zone
from core.exceptions import SchedulingError

logger = logging.getLogger(__name__)


class FacilityTimezoneMiddleware:
    """Activate the configured facility timezone for the duration of a request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        with timezone.override(facility_zone()):
            response = self.get_response(request)
        return response


class SchedulingErrorMiddleware:
    """Translate SchedulingError and PermissionDenied into JSON responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        """
        Args:
            request: The request whose view raised.
            exception: The raised exception.

        Returns:
            A JsonResponse for domain and permission errors, otherwise None so
            Django's default handling applies.
        """
        if isinstance(exception, SchedulingError):
            log = logger.warning if exception.http_status >= 500 else logger.info
            log(
                "%s %s failed: %s (%s)",
                request.method,
                request.path,
                exception.kind,
                exception.message,
            )
            return JsonResponse(exception.as_dict(), status=exception.http_status)

        if isinstance(exception, PermissionDenied):
            message = str(exception) or "You don't have permission to perform this action."
            return JsonResponse({"error": "forbidden", "message": message}, status=403)

        return None
