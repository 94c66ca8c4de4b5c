"""Venue credit models for Meetpoint."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class VenueCreditCode(models.Model):
    """One redemption code per invite, valid for a short window around the event."""

    invite = models.OneToOneField(
        "invites.DateInvite",
        on_delete=models.CASCADE,
        related_name="venue_credit",
    )
    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.PROTECT,
        related_name="credit_codes",
    )
    code = models.CharField(max_length=32, unique=True)
    event_start = models.DateTimeField()
    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Venue credit code")
        verbose_name_plural = _("Venue credit codes")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(valid_until__gt=models.F("valid_from")),
                name="venue_credit_valid_window",
            ),
        ]

    def __str__(self) -> str:
        return self.code

    def is_redeemable(self, now=None) -> bool:
        now = now or timezone.now()
        return self.valid_from <= now <= self.valid_until
