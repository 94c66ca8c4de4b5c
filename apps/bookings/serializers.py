"""Serializers for the booking domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import TimeRange

from .domain.entities import AvailabilityView, MeetingContext
from .models import Booking, Hold


class AvailabilityQuerySerializer(serializers.Serializer):
    """Query parameters of the availability endpoint."""

    counterpart = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    context = serializers.ChoiceField(
        choices=[c.value for c in MeetingContext],
        default=MeetingContext.SOCIAL.value,
    )
    view = serializers.ChoiceField(
        choices=[v.value for v in AvailabilityView],
        default=AvailabilityView.MUTUAL.value,
    )
    venue = serializers.IntegerField(min_value=1, required=False)
    duration_minutes = serializers.IntegerField(min_value=15, max_value=480, required=False)


class IntersectionQuerySerializer(serializers.Serializer):
    guest = serializers.IntegerField(min_value=1)
    venue = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    duration_minutes = serializers.IntegerField(min_value=15, max_value=480, default=90)


class TimeRangeInputMixin:
    """Builds a TimeRange from ``starts_at`` plus ``duration_minutes``."""

    def validate_starts_at(self, value):  # type: ignore
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value

    def time_range(self, default_duration: int) -> TimeRange:
        data = self.validated_data  # type: ignore[attr-defined]
        duration = data.get("duration_minutes") or default_duration
        return TimeRange.starting_at(data["starts_at"], duration)


class HoldCreateSerializer(TimeRangeInputMixin, serializers.Serializer):
    guest = serializers.IntegerField(min_value=1)
    venue = serializers.IntegerField(min_value=1)
    starts_at = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(min_value=15, max_value=480, default=90)


class ConfirmHoldSerializer(serializers.Serializer):
    invite = serializers.IntegerField(min_value=1)


class SwapRequestSerializer(TimeRangeInputMixin, serializers.Serializer):
    """New venue and start for an invite; duration defaults to the invite's."""

    venue = serializers.IntegerField(min_value=1)
    starts_at = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(min_value=15, max_value=480, required=False)


class TimeRangeSerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()


class HoldSerializer(serializers.ModelSerializer):
    host_id = serializers.ReadOnlyField(source="host.id")
    guest_id = serializers.ReadOnlyField(source="guest.id")
    venue_id = serializers.ReadOnlyField(source="venue.id")

    class Meta:
        model = Hold
        fields = [
            "id",
            "host_id",
            "guest_id",
            "venue_id",
            "starts_at",
            "ends_at",
            "time_slot",
            "duration_minutes",
            "status",
            "expires_at",
            "created_at",
        ]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Confirmed booking as returned by the confirm endpoint."""

    invite_id = serializers.ReadOnlyField(source="invite.id")
    venue_id = serializers.ReadOnlyField(source="venue.id")
    venue_name = serializers.ReadOnlyField(source="venue.name")
    host_id = serializers.ReadOnlyField(source="host.id")
    guest_id = serializers.ReadOnlyField(source="guest.id")

    class Meta:
        model = Booking
        fields = [
            "id",
            "invite_id",
            "venue_id",
            "venue_name",
            "host_id",
            "guest_id",
            "starts_at",
            "ends_at",
            "time_slot",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
