"""
Accounts models for WardRoster.

Defines the custom User model used as the staff directory. The User model uses
email as the unique identifier (no username).

Key design decisions:
  - AbstractBaseUser gives us full control over the user model
  - Role is a simple enum field; permissions are derived from role in view mixins
  - Only active users in the NURSE role can receive shift assignments
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Custom manager for the WardRoster User model (email-based auth)."""

    def create_user(self, email: str, password: str = None, **extra_fields) -> "User":
        """
        Create and save a regular user with the given email and password.

        Args:
            email: The user's email address (used as login identifier).
            password: The raw password (will be hashed).
            **extra_fields: Additional fields to set on the User model.

        Returns:
            The newly created User instance.

        Raises:
            ValueError: If email is not provided.
        """
        if not email:
            raise ValueError(_("The Email field must be set"))
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str, **extra_fields) -> "User":
        """Create a Django-admin superuser; superusers act as head nurses."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.Role.HEAD_NURSE)
        return self.create_user(email, password, **extra_fields)

    def active_head_nurses(self):
        return self.filter(role=User.Role.HEAD_NURSE, is_active=True)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model for WardRoster.

    Role determines what the user can do:
      - HEAD_NURSE: creates shifts, assigns nurses, resolves leave requests
      - NURSE: works shifts, requests leave, views own schedule
    """

    class Role(models.TextChoices):
        NURSE = "nurse", _("Nurse")
        HEAD_NURSE = "head_nurse", _("Head Nurse")

    # Core identity
    email = models.EmailField(_("email address"), unique=True)
    name = models.CharField(_("name"), max_length=255)

    # Role & status
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.NURSE)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Django admin access

    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["name"]

    def __str__(self) -> str:
        """Return the user's name and role for display."""
        return f"{self.get_full_name()} ({self.get_role_display()})"

    def get_full_name(self) -> str:
        return self.name or self.email

    def get_short_name(self) -> str:
        return self.get_full_name().split(" ")[0]

    @property
    def is_head_nurse(self) -> bool:
        """Check if this user has the Head Nurse role."""
        return self.role == self.Role.HEAD_NURSE

    @property
    def is_nurse(self) -> bool:
        """Check if this user has the Nurse role."""
        return self.role == self.Role.NURSE

    @property
    def can_be_assigned(self) -> bool:
        """Return True if this user may receive new shift assignments."""
        return self.is_active and self.is_nurse
