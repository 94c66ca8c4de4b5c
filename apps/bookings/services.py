"""Domain services for holds and booking confirmation."""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings  # type: ignore

from shared.domain.value_objects import TimeRange

from .domain.errors import IneligibleOperation
from .models import Booking, Hold
from .store import BookingStore, DjangoBookingStore


def default_hold_ttl() -> timedelta:
    return timedelta(minutes=getattr(settings, "HOLD_TTL_MINUTES", 5))


class HoldManager:
    """
    Requests short-lived exclusive reservations on a venue time range

    Exclusivity is the store's job; an abandoned hold simply lapses when
    its TTL passes and there is no cancel operation.
    """

    def __init__(self, store: BookingStore | None = None):
        self.store = store or DjangoBookingStore()

    def create_hold(
        self,
        host_id,
        guest_id,
        venue_id,
        time_range: TimeRange,
        duration_minutes: int | None = None,
        ttl: timedelta | None = None,
    ) -> int:
        """
        Reserve ``time_range`` at the venue and return the hold id

        Raises:
            IneligibleOperation: the range overlaps another open hold or a booking
            NotFound: venue does not exist
        """
        if host_id == guest_id:
            raise IneligibleOperation("Host and guest must be different users")
        duration = duration_minutes or time_range.duration_minutes
        return self.store.create_hold(
            host_id,
            guest_id,
            venue_id,
            time_range,
            duration,
            ttl or default_hold_ttl(),
        )

    def get_hold(self, hold_id) -> Hold:
        return self.store.get_hold(hold_id)


class BookingConfirmation:
    """Turns a still-valid hold plus an invite into a durable booking."""

    def __init__(self, store: BookingStore | None = None):
        self.store = store or DjangoBookingStore()

    def confirm(self, hold_id, invite_id) -> Booking:
        """
        Confirm the hold and return the new booking

        Raises:
            HoldExpired: the caller must restart the availability search
            HoldAlreadyConsumed: the hold was already confirmed
        """
        booking_id = self.store.confirm_booking(hold_id, invite_id)
        return self.store.get_booking(booking_id)
