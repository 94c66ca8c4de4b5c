"""Admin registration for venue credit codes."""

from __future__ import annotations

from django.contrib import admin

from .models import VenueCreditCode


@admin.register(VenueCreditCode)
class VenueCreditCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "venue", "invite", "event_start", "valid_from", "valid_until")
    list_filter = ("venue",)
    search_fields = ("code", "venue__name")
    readonly_fields = ("code", "created_at")
