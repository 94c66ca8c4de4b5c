"""Hold and booking models for Meetpoint."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeRange


class TimeSlotMixin(models.Model):
    """Discrete start/end columns kept in sync with the persisted range literal."""

    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    time_slot = models.CharField(
        max_length=100,
        editable=False,
        help_text=_("Half-open range literal, e.g. [start,end)."),
    )

    class Meta:
        abstract = True

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.starts_at, self.ends_at)

    def set_time_range(self, time_range: TimeRange) -> None:
        self.starts_at = time_range.start
        self.ends_at = time_range.end
        self.time_slot = time_range.to_literal()

    def save(self, *args, **kwargs):  # type: ignore
        self.time_slot = TimeRange(self.starts_at, self.ends_at).to_literal()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and ("starts_at" in update_fields or "ends_at" in update_fields):
            kwargs["update_fields"] = set(update_fields) | {"time_slot"}
        super().save(*args, **kwargs)


class Hold(TimeSlotMixin):
    """Short-lived exclusive reservation of a venue time range."""

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        CONFIRMED = "confirmed", _("Confirmed")
        EXPIRED = "expired", _("Expired")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_holds",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guest_holds",
    )
    venue = models.ForeignKey("venues.Venue", on_delete=models.CASCADE, related_name="holds")
    duration_minutes = models.PositiveSmallIntegerField(default=90)
    expires_at = models.DateTimeField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Hold")
        verbose_name_plural = _("Holds")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["venue", "status", "starts_at", "ends_at"]),
            models.Index(fields=["expires_at"]),
        ]

    def __str__(self) -> str:
        return f"Hold #{self.pk} at {self.venue_id} {self.time_slot} ({self.status})"

    def is_expired(self, now=None) -> bool:
        now = now or timezone.now()
        return self.status == self.Status.EXPIRED or (
            self.status == self.Status.OPEN and self.expires_at <= now
        )


class Booking(TimeSlotMixin):
    """Confirmed meeting at a venue, created once per confirmed hold."""

    invite = models.OneToOneField(
        "invites.DateInvite",
        on_delete=models.CASCADE,
        related_name="booking",
    )
    hold = models.OneToOneField(
        Hold,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="booking",
    )
    venue = models.ForeignKey("venues.Venue", on_delete=models.PROTECT, related_name="bookings")
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_bookings",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="guest_bookings",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-starts_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(ends_at__gt=models.F("starts_at")),
                name="booking_valid_time_range",
            ),
        ]
        indexes = [
            models.Index(fields=["venue", "starts_at", "ends_at"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for invite {self.invite_id} at {self.venue_id}"
