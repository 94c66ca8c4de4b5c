"""Venue models for Meetpoint."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Venue(models.Model):
    """A bar, restaurant or cafe that hosts meetings."""

    name = models.CharField(max_length=255)
    city = models.CharField(max_length=100, blank=True)
    address_line = models.CharField(max_length=255, blank=True)
    opens_at = models.TimeField(null=True, blank=True)
    closes_at = models.TimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Venue")
        verbose_name_plural = _("Venues")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.city})" if self.city else self.name

    @property
    def hours(self):
        """Operating hours, or None when the venue has not published them."""
        from apps.bookings.domain.intervals import VenueHours

        if self.opens_at is None or self.closes_at is None:
            return None
        return VenueHours(opens_at=self.opens_at, closes_at=self.closes_at)
