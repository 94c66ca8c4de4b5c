"""Serializers for wallet data."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Wallet


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = ["balance", "currency", "updated_at"]
        read_only_fields = fields
