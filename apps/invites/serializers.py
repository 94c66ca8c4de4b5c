"""Serializers for the invites domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class MeetFormSerializer(serializers.Serializer):
    answers = serializers.DictField(required=False, default=dict)
