"""
Accounts views for WardRoster.

View inventory:
  LoginView     → POST email/password, starts a session
  LogoutView    → POST-only logout
  MeView        → GET the signed-in user's profile
  RegisterView  → POST: head nurse creates a staff account
  UserListView  → GET: head nurse browses the staff directory
"""

import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth import password_validation
from django.core import exceptions as django_exceptions
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views import View

from apps.accounts.models import User
from core.exceptions import ConflictError, ValidationError
from core.http import get_text, parse_json_body
from core.permissions import HeadNurseRequiredMixin, StaffRequiredMixin

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    return {
        "id": user.pk,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "is_active": user.is_active,
        "date_joined": user.date_joined.isoformat(),
    }


# ---------------------------------------------------------------------------
# Auth views
# ---------------------------------------------------------------------------

class LoginView(View):
    """Email/password login. Deactivated accounts cannot sign in."""

    def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)
        email = get_text(data, "email").strip()
        password = get_text(data, "password")
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = authenticate(request, username=email, password=password)
        if user is None:
            logger.info("Failed login for %s", email)
            return JsonResponse(
                {"error": "invalid_credentials", "message": "Invalid email or password."},
                status=401,
            )

        login(request, user)
        return JsonResponse(serialize_user(user))


class LogoutView(View):
    """POST-only logout to prevent CSRF-based logout via GET links."""

    def post(self, request: HttpRequest) -> HttpResponse:
        logout(request)
        return HttpResponse(status=204)


class MeView(StaffRequiredMixin, View):

    def get(self, request: HttpRequest) -> JsonResponse:
        return JsonResponse(serialize_user(request.user))


# ---------------------------------------------------------------------------
# Staff directory (head nurse)
# ---------------------------------------------------------------------------

class RegisterView(HeadNurseRequiredMixin, View):
    """
    Create a staff account.

    Body: name, email, password (all required), role ("nurse" by default).
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)
        name = get_text(data, "name").strip()
        email = get_text(data, "email").strip()
        password = get_text(data, "password")
        role = get_text(data, "role") or User.Role.NURSE

        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required.")
        if role not in User.Role.values:
            raise ValidationError('Role must be either "nurse" or "head_nurse".')

        email = User.objects.normalize_email(email)
        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("A user with this email already exists.")

        candidate = User(email=email, name=name, role=role)
        try:
            password_validation.validate_password(password, user=candidate)
        except django_exceptions.ValidationError as exc:
            raise ValidationError(" ".join(exc.messages)) from exc

        user = User.objects.create_user(email=email, password=password, name=name, role=role)
        logger.info("Head nurse %s created %s account %s", request.user.pk, role, user.pk)
        return JsonResponse(serialize_user(user), status=201)


class UserListView(HeadNurseRequiredMixin, View):
    """Query params: role, active ("true"/"false")."""

    def get(self, request: HttpRequest) -> JsonResponse:
        users = User.objects.order_by("name")
        role = request.GET.get("role")
        if role:
            users = users.filter(role=role)
        active = request.GET.get("active")
        if active in ("true", "false"):
            users = users.filter(is_active=active == "true")
        return JsonResponse({"users": [serialize_user(u) for u in users]})
