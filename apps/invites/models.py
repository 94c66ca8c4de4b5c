"""Invite and meeting request models for Meetpoint."""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

SOCIAL_DEFAULT_DURATION = 90
BUSINESS_DEFAULT_DURATION = 60


class DateInvite(models.Model):
    """Social meeting request from an inviter to an invitee at a venue."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    inviter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_invites",
    )
    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_invites",
    )
    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invites",
    )
    proposed_date = models.DateField()
    proposed_time = models.TimeField()
    duration_minutes = models.PositiveSmallIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    message = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Date invite")
        verbose_name_plural = _("Date invites")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["inviter", "proposed_date"]),
            models.Index(fields=["invitee", "proposed_date"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"Invite #{self.pk} {self.proposed_date} {self.proposed_time:%H:%M}"

    @property
    def effective_duration(self) -> int:
        return self.duration_minutes or SOCIAL_DEFAULT_DURATION

    def is_participant(self, user) -> bool:
        user_id = getattr(user, "pk", user)
        return user_id in (self.inviter_id, self.invitee_id)

    def proposed_start(self, tz=None) -> datetime:
        """Combine the separate date and time fields into one aware timestamp.

        Without ``tz`` the fields are read as UTC.
        """
        naive = datetime.combine(self.proposed_date, self.proposed_time)
        return naive.replace(tzinfo=tz or dt_timezone.utc)


class MeetingRequest(models.Model):
    """Professional meeting request; the proposed time is a single timestamp."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")
        COMPLETED = "completed", _("Completed")

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_meeting_requests",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_meeting_requests",
    )
    proposed_time = models.DateTimeField()
    duration_minutes = models.PositiveSmallIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Meeting request")
        verbose_name_plural = _("Meeting requests")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["sender", "proposed_time"]),
            models.Index(fields=["receiver", "proposed_time"]),
        ]

    def __str__(self) -> str:
        return f"MeetingRequest #{self.pk} at {self.proposed_time:%Y-%m-%d %H:%M}"

    @property
    def effective_duration(self) -> int:
        return self.duration_minutes or BUSINESS_DEFAULT_DURATION


class MeetFormCompletion(models.Model):
    """Post-meeting check-in submitted by one of the invite's parties."""

    invite = models.ForeignKey(DateInvite, on_delete=models.CASCADE, related_name="meet_form_completions")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="meet_form_completions",
    )
    answers = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Meet form completion")
        verbose_name_plural = _("Meet form completions")
        constraints = [
            models.UniqueConstraint(fields=["invite", "user"], name="meet_form_once_per_user"),
        ]

    def __str__(self) -> str:
        return f"Meet form for invite {self.invite_id} by {self.user_id}"
