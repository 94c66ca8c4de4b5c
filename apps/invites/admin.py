"""Admin registrations for invites."""

from __future__ import annotations

from django.contrib import admin

from .models import DateInvite, MeetFormCompletion, MeetingRequest


@admin.register(DateInvite)
class DateInviteAdmin(admin.ModelAdmin):
    list_display = ("id", "inviter", "invitee", "venue", "proposed_date", "proposed_time", "status")
    list_filter = ("status", "proposed_date")
    search_fields = ("inviter__email", "invitee__email", "venue__name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(MeetingRequest)
class MeetingRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "receiver", "proposed_time", "duration_minutes", "status")
    list_filter = ("status",)
    search_fields = ("sender__email", "receiver__email")


@admin.register(MeetFormCompletion)
class MeetFormCompletionAdmin(admin.ModelAdmin):
    list_display = ("invite", "user", "created_at")
    readonly_fields = ("created_at",)
