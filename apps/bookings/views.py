"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import permissions, status, views  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.venues.models import Venue

from .availability import AvailabilityResolver
from .domain.errors import NotAuthorized, NotFound, SchedulingError
from .responses import error_response, result_response
from .serializers import (
    AvailabilityQuerySerializer,
    BookingSerializer,
    ConfirmHoldSerializer,
    HoldCreateSerializer,
    HoldSerializer,
    IntersectionQuerySerializer,
    SwapRequestSerializer,
    TimeRangeSerializer,
)
from .services import BookingConfirmation, HoldManager
from .store import DjangoBookingStore
from .swap import SwapCoordinator


class AvailabilityView(views.APIView):
    """Candidate start times for a meeting with ``counterpart`` on a date."""

    permission_classes = [permissions.IsAuthenticated]
    resolver_class = AvailabilityResolver

    def get(self, request):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        venue_hours = None
        if data.get("venue"):
            venue = Venue.objects.filter(pk=data["venue"], is_active=True).first()
            if venue is None:
                return error_response(NotFound("Venue not found"))
            venue_hours = venue.hours

        try:
            slots = self.resolver_class().get_available_slots(
                data["counterpart"],
                data["date"],
                data["context"],
                initiator=request.user,
                venue_hours=venue_hours,
                view=data["view"],
                duration_minutes=data.get("duration_minutes"),
            )
        except SchedulingError as exc:
            return error_response(exc)
        return Response({"date": data["date"], "slots": [slot.isoformat() for slot in slots]})


class IntersectionView(views.APIView):
    """Windows free for the caller, the guest and the venue."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        query = IntersectionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        try:
            windows = DjangoBookingStore().intersection_search(
                request.user.pk,
                data["guest"],
                data["venue"],
                data["duration_minutes"],
                data["date"],
            )
        except SchedulingError as exc:
            return error_response(exc)
        return Response({"windows": TimeRangeSerializer(windows, many=True).data})


class HoldCreateView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = HoldCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        manager = HoldManager()
        try:
            hold_id = manager.create_hold(
                request.user.pk,
                data["guest"],
                data["venue"],
                serializer.time_range(data["duration_minutes"]),
                duration_minutes=data["duration_minutes"],
            )
            hold = manager.get_hold(hold_id)
        except SchedulingError as exc:
            return error_response(exc)
        return Response(HoldSerializer(hold).data, status=status.HTTP_201_CREATED)


class HoldConfirmView(views.APIView):
    """Turn the caller's hold into a booking for an invite."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, hold_id):  # type: ignore
        serializer = ConfirmHoldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        confirmation = BookingConfirmation()
        try:
            hold = confirmation.store.get_hold(hold_id)
            if request.user.pk not in (hold.host_id, hold.guest_id):
                raise NotAuthorized("Only the host or the guest can confirm this hold")
            booking = confirmation.confirm(hold_id, serializer.validated_data["invite"])
        except SchedulingError as exc:
            return error_response(exc)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class SwapMixin:
    """Parses the new venue and time range for an invite swap."""

    def parse_swap(self, request, invite_id, coordinator: SwapCoordinator):  # type: ignore
        serializer = SwapRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        invite = coordinator.store.get_invite(invite_id)
        return invite, serializer.validated_data["venue"], serializer.time_range(invite.effective_duration)


class SwapCheckView(SwapMixin, views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, invite_id):  # type: ignore
        coordinator = SwapCoordinator()
        try:
            invite, venue_id, time_range = self.parse_swap(request, invite_id, coordinator)
            if not invite.is_participant(request.user):
                raise NotAuthorized("Only participants can check a swap")
            verdict = coordinator.can_swap(invite_id, venue_id, time_range)
        except SchedulingError as exc:
            return error_response(exc)
        return Response(
            {
                "allowed": verdict.allowed,
                "message": verdict.message,
                "fee": str(coordinator.fee.amount),
                "currency": coordinator.fee.currency,
            }
        )


class SwapView(SwapMixin, views.APIView):
    """Charge the swap fee and move the invite to a new venue and time."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, invite_id):  # type: ignore
        coordinator = SwapCoordinator()
        try:
            _, venue_id, time_range = self.parse_swap(request, invite_id, coordinator)
        except SchedulingError as exc:
            return error_response(exc)
        result = coordinator.charge_and_execute_swap(request.user, invite_id, venue_id, time_range)
        return result_response(result)
