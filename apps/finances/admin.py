"""Admin registration for wallets."""

from __future__ import annotations

from django.contrib import admin

from .models import Wallet


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "currency", "updated_at")
    search_fields = ("user__email",)
    readonly_fields = ("created_at", "updated_at")
