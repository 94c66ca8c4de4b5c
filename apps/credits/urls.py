"""URL routing for venue credits."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import IssueVenueCreditView

urlpatterns = [
    path("invites/<int:invite_id>/", IssueVenueCreditView.as_view(), name="venue-credit-issue"),
]
