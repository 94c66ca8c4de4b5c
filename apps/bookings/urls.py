"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    AvailabilityView,
    HoldConfirmView,
    HoldCreateView,
    IntersectionView,
    SwapCheckView,
    SwapView,
)

urlpatterns = [
    path("availability/", AvailabilityView.as_view(), name="booking-availability"),
    path("intersection/", IntersectionView.as_view(), name="booking-intersection"),
    path("holds/", HoldCreateView.as_view(), name="hold-create"),
    path("holds/<int:hold_id>/confirm/", HoldConfirmView.as_view(), name="hold-confirm"),
    path("invites/<int:invite_id>/swap/check/", SwapCheckView.as_view(), name="invite-swap-check"),
    path("invites/<int:invite_id>/swap/", SwapView.as_view(), name="invite-swap"),
]
