"""API views for the wallet balance.

Top-ups go through the payment processor outside this service; the
wallet is read-only over the API.
"""

from __future__ import annotations

from django.http import Http404  # type: ignore
from rest_framework import generics, permissions  # type: ignore

from .models import Wallet
from .serializers import WalletSerializer


class WalletView(generics.RetrieveAPIView):
    """Balance of the authenticated user."""

    serializer_class = WalletSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):  # type: ignore
        wallet = Wallet.objects.filter(user=self.request.user).first()
        if wallet is None:
            raise Http404("Wallet not found")
        return wallet
