"""Admin registrations for venues."""

from __future__ import annotations

from django.contrib import admin

from .models import Venue


@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "opens_at", "closes_at", "is_active")
    list_filter = ("city", "is_active")
    search_fields = ("name", "city", "address_line")
    readonly_fields = ("created_at", "updated_at")
