"""
WardRoster root URL configuration.

URL namespaces follow the pattern: app_name:view_name
  - accounts:      login, logout, me, register, users
  - scheduling:    shifts, assignments, leave requests, my schedule
  - notifications: list, mark_read
"""

from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone


def health_check(request):
    """
    Liveness/readiness probe.

    Returns 200 with a JSON body when the database is reachable, 503 otherwise.
    """
    try:
        connection.ensure_connection()
        db_ok = True
    except DatabaseError:
        db_ok = False

    return JsonResponse(
        {
            "status": "ok" if db_ok else "degraded",
            "db": db_ok,
            "timestamp": timezone.now().isoformat(),
        },
        status=200 if db_ok else 503,
    )


urlpatterns = [
    # No auth, must be fast
    path("health/", health_check, name="health_check"),

    path("admin/", admin.site.urls),

    path("api/auth/", include("apps.accounts.urls", namespace="accounts")),
    path("api/", include("apps.scheduling.urls", namespace="scheduling")),
    path("notifications/", include("apps.notifications.urls", namespace="notifications")),
]
