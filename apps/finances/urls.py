"""URL routing for the finances domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import WalletView

urlpatterns = [
    path("wallet/", WalletView.as_view(), name="wallet-detail"),
]
