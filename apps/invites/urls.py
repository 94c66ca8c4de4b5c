"""URL routing for the invites domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import MeetFormView, MeetWindowView

urlpatterns = [
    path("<int:invite_id>/meet-window/", MeetWindowView.as_view(), name="invite-meet-window"),
    path("<int:invite_id>/meet-form/", MeetFormView.as_view(), name="invite-meet-form"),
]
