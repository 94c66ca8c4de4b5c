"""API views for venue credits."""

from __future__ import annotations

from rest_framework import permissions, views  # type: ignore

from apps.bookings.responses import result_response

from .services import VenueCreditIssuer


class IssueVenueCreditView(views.APIView):
    """Issue (or resend) the venue credit code of an invite to both parties."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, invite_id):  # type: ignore
        result = VenueCreditIssuer().issue(request.user, invite_id)
        return result_response(result)
