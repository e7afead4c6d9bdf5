"""
Role-based permission mixins for WardRoster views.

Every API view uses one of these mixins. They build on Django's
LoginRequiredMixin and add role checks, so the service layer always receives
an authenticated, authorised actor.

Roles can differ per HTTP method (e.g. any staff member may list shifts, only
a head nurse may create one):

    class ShiftCollectionView(StaffRequiredMixin, View):
        method_roles = {"POST": [User.Role.HEAD_NURSE]}
"""

import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, JsonResponse

from apps.accounts.models import User

logger = logging.getLogger(__name__)


class RoleRequiredMixin(LoginRequiredMixin):
    """
    Base mixin that enforces a specific user role.

    Subclasses set `required_roles` to the role string(s) to allow, and may
    override them per method with `method_roles`.
    """

    required_roles: list[str] = []
    method_roles: dict[str, list[str]] = {}

    def get_required_roles(self) -> list[str]:
        return self.method_roles.get(self.request.method, self.required_roles)

    def handle_no_permission(self):
        """Unauthenticated API calls get a JSON 401 instead of a login redirect."""
        if self.request.user.is_authenticated:
            raise PermissionDenied(self.get_permission_denied_message())
        return JsonResponse(
            {"error": "unauthenticated", "message": "Authentication is required."},
            status=401,
        )

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        """
        Check authentication, active status and role before dispatching.

        Raises:
            PermissionDenied: If the user doesn't have the required role.
        """
        if not request.user.is_authenticated or not request.user.is_active:
            return self.handle_no_permission()

        roles = self.get_required_roles()
        if roles and request.user.role not in roles:
            logger.warning(
                "User %d (role=%s) attempted %s %s which requires role in %s.",
                request.user.pk,
                request.user.role,
                request.method,
                request.path,
                roles,
            )
            raise PermissionDenied("You don't have permission to perform this action.")

        return super().dispatch(request, *args, **kwargs)


class HeadNurseRequiredMixin(RoleRequiredMixin):
    """Restrict access to head nurses."""

    required_roles = [User.Role.HEAD_NURSE]


class NurseRequiredMixin(RoleRequiredMixin):
    """Restrict access to nurses (the staff who hold assignments)."""

    required_roles = [User.Role.NURSE]


class StaffRequiredMixin(RoleRequiredMixin):
    """Any authenticated, active user in either role."""

    required_roles = [User.Role.NURSE, User.Role.HEAD_NURSE]
