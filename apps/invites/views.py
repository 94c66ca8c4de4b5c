"""API views for the post-meeting check-in."""

from __future__ import annotations

from rest_framework import permissions, views  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.errors import NotAuthorized, SchedulingError
from apps.bookings.responses import error_response, result_response
from apps.bookings.store import DjangoBookingStore

from .serializers import MeetFormSerializer
from .services import submit_meet_form


class MeetWindowView(views.APIView):
    """Whether the meet form of an invite can be submitted right now."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, invite_id):  # type: ignore
        store = DjangoBookingStore()
        try:
            invite = store.get_invite(invite_id)
            if not invite.is_participant(request.user):
                raise NotAuthorized("Only participants can view the meet form")
            is_open = store.meet_form_window_open(invite_id)
        except SchedulingError as exc:
            return error_response(exc)
        return Response({"open": is_open})


class MeetFormView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, invite_id):  # type: ignore
        serializer = MeetFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = submit_meet_form(request.user, invite_id, serializer.validated_data["answers"])
        return result_response(result)
