"""User domain models for Meetpoint.

A party to a meeting is a platform user. The scheduling core only reads
users: their contact email, verification flag, the external calendar
links used for availability sync and the time zone in which their
separately stored date/time commitments are interpreted.
"""

from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """Manager that uses email as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Platform user: a party to invites, holds and bookings."""

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in the interface and notifications."),
    )
    email = models.EmailField(_("Email"), unique=True)
    is_verified = models.BooleanField(_("Identity verified"), default=False)
    calendar_link_business = models.URLField(
        _("Business calendar link"),
        blank=True,
        help_text=_("Cal.com, Calendly or iCal link used for professional meetings."),
    )
    calendar_link_social = models.URLField(
        _("Social calendar link"),
        blank=True,
        help_text=_("Cal.com, Calendly or iCal link used for social meetings."),
    )
    time_zone = models.CharField(
        _("Time zone"),
        max_length=64,
        blank=True,
        help_text=_("IANA name, e.g. Europe/London. Empty means the platform default."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.email

    def calendar_link_for(self, context: str) -> str:
        """Calendar link for a meeting context ("business" or "social")."""
        if context == "business":
            return self.calendar_link_business
        return self.calendar_link_social

    @property
    def tzinfo(self):
        """Local time zone of the user, falling back to the current Django zone."""
        if self.time_zone:
            try:
                return ZoneInfo(self.time_zone)
            except (ZoneInfoNotFoundError, ValueError):
                pass
        return timezone.get_current_timezone()

    @property
    def display_name(self) -> str:
        return self.first_name or self.username or self.email
