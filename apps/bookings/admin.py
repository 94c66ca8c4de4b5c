"""Admin registration for holds and bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, Hold


@admin.register(Hold)
class HoldAdmin(admin.ModelAdmin):
    list_display = ("id", "venue", "host", "guest", "starts_at", "ends_at", "status", "expires_at")
    list_filter = ("status", "venue")
    search_fields = ("host__email", "guest__email", "venue__name")
    readonly_fields = ("time_slot", "created_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "invite", "venue", "host", "guest", "starts_at", "ends_at", "created_at")
    list_filter = ("venue", "starts_at")
    search_fields = ("host__email", "guest__email", "venue__name")
    readonly_fields = ("time_slot", "created_at", "updated_at")
