"""
Paid rescheduling of an invite

A swap moves an invite (and its booking, if any) to another venue and
time for a flat fee. Balance and bookings live in separate stores, so the
fee is taken first and credited back if the move does not commit:

    debit fee -> execute_swap -> on any failure, credit fee back

The inviter's balance ends either unchanged or reduced by exactly one fee.
"""

from __future__ import annotations

import logging
from datetime import date, time
from decimal import Decimal

from django.conf import settings  # type: ignore

from apps.finances.services import WalletService
from shared.domain.value_objects import Money, TimeRange

from .domain.entities import ServiceResult, SwapEligibility
from .domain.errors import InsufficientFunds, NotAuthorized, SchedulingError
from .store import BookingStore, DjangoBookingStore

logger = logging.getLogger(__name__)


def swap_fee() -> Money:
    amount = Decimal(str(getattr(settings, "SWAP_FEE", "1.99")))
    return Money(amount, getattr(settings, "SWAP_FEE_CURRENCY", "GBP"))


class SwapCoordinator:
    """Checks and performs paid reschedules of an invite."""

    def __init__(
        self,
        store: BookingStore | None = None,
        wallets: WalletService | None = None,
        fee: Money | None = None,
    ):
        self.store = store or DjangoBookingStore()
        self.wallets = wallets or WalletService()
        self.fee = fee or swap_fee()

    def can_swap(self, invite_id, new_venue_id, new_time_range: TimeRange) -> SwapEligibility:
        return self.store.can_swap(invite_id, new_venue_id, new_time_range)

    def insufficient_funds_message(self) -> str:
        return f"Insufficient balance. Add funds to pay the {self.fee.display()} swap fee."

    def charge_and_execute_swap(
        self,
        caller,
        invite_id,
        new_venue_id,
        new_time_range: TimeRange,
        new_proposed_date: date | None = None,
        new_proposed_time: time | None = None,
    ) -> ServiceResult:
        """
        Charge the swap fee and move the invite

        Only the inviter may reschedule. Nothing is debited unless the
        balance covers the fee; once debited, any failure of the move
        credits the fee back before the error is returned.
        """
        caller_id = getattr(caller, "pk", caller)

        try:
            invite = self.store.get_invite(invite_id)
            if invite.inviter_id != caller_id:
                raise NotAuthorized("Only the inviter can reschedule")

            balance = self.wallets.get_balance(caller_id)
            if balance is None or balance.currency != self.fee.currency or balance.amount < self.fee.amount:
                raise InsufficientFunds(self.insufficient_funds_message())

            self.wallets.debit(caller_id, self.fee)
        except InsufficientFunds:
            logger.info(f"Swap of invite {invite_id} refused: user {caller_id} cannot cover {self.fee}")
            return ServiceResult(error=self.insufficient_funds_message(), code=InsufficientFunds.code)
        except SchedulingError as exc:
            logger.warning(f"Swap of invite {invite_id} by user {caller_id} refused: {exc.message}")
            return ServiceResult.failure(exc)
        except Exception:
            logger.error(f"Swap of invite {invite_id} by user {caller_id} failed before charging", exc_info=True)
            return ServiceResult(error="Swap failed", code="swap_failed")

        try:
            self.store.execute_swap(
                invite_id,
                new_venue_id,
                new_time_range,
                new_proposed_date=new_proposed_date,
                new_proposed_time=new_proposed_time,
            )
        except Exception as exc:
            self._refund(caller_id, invite_id)
            if isinstance(exc, SchedulingError):
                logger.warning(f"Swap of invite {invite_id} failed, fee refunded: {exc.message}")
                return ServiceResult.failure(exc)
            logger.error(f"Swap of invite {invite_id} failed, fee refunded: {exc}", exc_info=True)
            return ServiceResult(error=str(exc) or "Swap failed", code="swap_failed")

        logger.info(f"Invite {invite_id} swapped by user {caller_id} for {self.fee}")
        return ServiceResult()

    def _refund(self, caller_id, invite_id) -> None:
        try:
            self.wallets.credit(caller_id, self.fee)
        except Exception:
            logger.critical(
                f"Could not refund swap fee {self.fee} to user {caller_id} for invite {invite_id}",
                exc_info=True,
            )
