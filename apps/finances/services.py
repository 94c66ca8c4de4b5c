"""Balance operations used by the scheduling core.

The wallet is a separate store of record from bookings, so every
operation here commits on its own. Debits are conditional updates and
never drive a balance below zero.
"""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.errors import InsufficientFunds, NotFound
from shared.domain.value_objects import Money

from .models import Wallet

logger = logging.getLogger(__name__)


class WalletService:
    """Read, debit and credit back a user's wallet balance."""

    def get_balance(self, user_id: int) -> Money | None:
        wallet = Wallet.objects.filter(user_id=user_id).only("balance", "currency").first()
        if wallet is None:
            return None
        return Money(wallet.balance, wallet.currency)

    @transaction.atomic
    def debit(self, user_id: int, amount: Money) -> None:
        """Take ``amount`` from the wallet, refusing to go below zero."""
        updated = Wallet.objects.filter(
            user_id=user_id,
            currency=amount.currency,
            balance__gte=amount.amount,
        ).update(balance=F("balance") - amount.amount, updated_at=timezone.now())
        if not updated:
            if not Wallet.objects.filter(user_id=user_id).exists():
                raise NotFound("Wallet not found")
            raise InsufficientFunds()
        logger.info(f"Debited {amount} from wallet of user {user_id}")

    @transaction.atomic
    def credit(self, user_id: int, amount: Money) -> None:
        """Return ``amount`` to the wallet."""
        updated = Wallet.objects.filter(user_id=user_id, currency=amount.currency).update(
            balance=F("balance") + amount.amount,
            updated_at=timezone.now(),
        )
        if not updated:
            raise NotFound("Wallet not found")
        logger.info(f"Credited {amount} back to wallet of user {user_id}")

