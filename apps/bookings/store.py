"""
Booking Store

The store owns every atomic operation on the contended resource, a
venue's time range. Services never lock anything themselves; they call
these operations and rely on the store for exclusivity.

DjangoBookingStore runs each operation in one database transaction and
serializes writers per venue by locking the venue row (SELECT FOR UPDATE
where the backend supports it), so two holds for overlapping ranges at
the same venue cannot both be inserted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.invites.models import DateInvite
from apps.venues.models import Venue
from shared.domain.value_objects import TimeRange

from .availability import default_venue_hours, get_conflicts, hourly_candidates, load_party
from .domain.entities import SwapEligibility
from .domain.errors import HoldAlreadyConsumed, HoldExpired, IneligibleOperation, NotFound
from .domain.intervals import is_busy
from .models import Booking, Hold

logger = logging.getLogger(__name__)

SWAP_CUTOFF = timedelta(hours=24)
MEET_FORM_OPENS_BEFORE = timedelta(minutes=15)
MEET_FORM_CLOSES_AFTER = timedelta(minutes=60)

SWAPPABLE_STATUSES = (DateInvite.Status.PENDING, DateInvite.Status.ACCEPTED)


class BookingStore(ABC):
    """Atomic operations over holds, bookings and invites."""

    @abstractmethod
    def intersection_search(
        self, host_id, guest_id, venue_id, duration_minutes: int, on_date: date
    ) -> list[TimeRange]:
        """Ranked candidate windows free for both parties and the venue."""

    @abstractmethod
    def create_hold(
        self, host_id, guest_id, venue_id, time_range: TimeRange, duration_minutes: int, ttl: timedelta
    ) -> int:
        """Insert an exclusive hold and return its id."""

    @abstractmethod
    def confirm_booking(self, hold_id, invite_id) -> int:
        """Turn an open hold into a booking for the invite and return the booking id."""

    @abstractmethod
    def can_swap(self, invite_id, new_venue_id, new_time_range: TimeRange) -> SwapEligibility:
        """Read-only eligibility check for moving an invite's meeting."""

    @abstractmethod
    def execute_swap(
        self,
        invite_id,
        new_venue_id,
        new_time_range: TimeRange,
        new_proposed_date: date | None = None,
        new_proposed_time: time | None = None,
    ) -> None:
        """Re-check eligibility and move the invite and its booking."""

    @abstractmethod
    def meet_form_window_open(self, invite_id) -> bool:
        """Whether the post-meeting check-in form is currently open."""

    @abstractmethod
    def get_invite(self, invite_id) -> DateInvite:
        pass

    @abstractmethod
    def get_hold(self, hold_id) -> Hold:
        pass

    @abstractmethod
    def get_booking(self, booking_id) -> Booking:
        pass

    @abstractmethod
    def get_booking_for_invite(self, invite_id) -> Booking | None:
        pass


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoBookingStore(BookingStore):
    """BookingStore backed by the Django ORM."""

    # ----- reads -----------------------------------------------------------

    def get_invite(self, invite_id) -> DateInvite:
        invite = DateInvite.objects.select_related("inviter", "invitee", "venue").filter(pk=invite_id).first()
        if invite is None:
            raise NotFound("Invite not found")
        return invite

    def get_hold(self, hold_id) -> Hold:
        hold = Hold.objects.select_related("venue").filter(pk=hold_id).first()
        if hold is None:
            raise NotFound("Hold not found")
        return hold

    def get_booking(self, booking_id) -> Booking:
        booking = Booking.objects.select_related("venue", "invite").filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    def get_booking_for_invite(self, invite_id) -> Booking | None:
        return Booking.objects.select_related("venue").filter(invite_id=invite_id).first()

    # ----- availability ----------------------------------------------------

    def intersection_search(
        self, host_id, guest_id, venue_id, duration_minutes: int, on_date: date
    ) -> list[TimeRange]:
        venue = Venue.objects.filter(pk=venue_id, is_active=True).first()
        if venue is None:
            raise NotFound("Venue not found")
        host = load_party(host_id)
        guest = load_party(guest_id)

        hours = venue.hours or default_venue_hours()
        host_conflicts = get_conflicts(host, on_date)
        guest_conflicts = get_conflicts(guest, on_date)
        now = timezone.now()

        windows = []
        for start in hourly_candidates(on_date, hours, host.tzinfo):
            window = TimeRange.starting_at(start, duration_minutes)
            if window.start <= now:
                continue
            if is_busy(start, duration_minutes, host_conflicts) or is_busy(start, duration_minutes, guest_conflicts):
                continue
            if not self._venue_is_free(venue.pk, window, now):
                continue
            windows.append(window)
        return windows

    # ----- holds and bookings ----------------------------------------------

    def create_hold(
        self, host_id, guest_id, venue_id, time_range: TimeRange, duration_minutes: int, ttl: timedelta
    ) -> int:
        now = timezone.now()
        if time_range.start <= now:
            raise IneligibleOperation("Cannot hold a time in the past")

        with transaction.atomic():
            self._lock_venue(venue_id)
            if not self._venue_is_free(venue_id, time_range, now):
                raise IneligibleOperation("This time slot is no longer available at the venue")

            hold = Hold(
                host_id=host_id,
                guest_id=guest_id,
                venue_id=venue_id,
                duration_minutes=duration_minutes,
                expires_at=now + ttl,
                status=Hold.Status.OPEN,
            )
            hold.set_time_range(time_range)
            hold.save()

        logger.info(f"Hold {hold.pk} created at venue {venue_id} for {time_range}, expires {hold.expires_at}")
        return hold.pk

    def confirm_booking(self, hold_id, invite_id) -> int:
        expired = False
        with transaction.atomic():
            hold = _lock_queryset_if_possible(Hold.objects.filter(pk=hold_id)).first()
            if hold is None:
                raise NotFound("Hold not found")
            if hold.status == Hold.Status.CONFIRMED:
                raise HoldAlreadyConsumed()

            if hold.is_expired():
                if hold.status == Hold.Status.OPEN:
                    hold.status = Hold.Status.EXPIRED
                    hold.save(update_fields=["status"])
                expired = True
            else:
                invite = _lock_queryset_if_possible(DateInvite.objects.filter(pk=invite_id)).first()
                if invite is None:
                    raise NotFound("Invite not found")
                if {invite.inviter_id, invite.invitee_id} != {hold.host_id, hold.guest_id}:
                    raise IneligibleOperation("Hold does not belong to this invite")
                if Booking.objects.filter(invite=invite).exists():
                    raise IneligibleOperation("This invite already has a booking")

                booking = Booking(
                    invite=invite,
                    hold=hold,
                    venue_id=hold.venue_id,
                    host_id=hold.host_id,
                    guest_id=hold.guest_id,
                )
                booking.set_time_range(hold.time_range)
                booking.save()

                hold.status = Hold.Status.CONFIRMED
                hold.save(update_fields=["status"])

        if expired:
            logger.warning(f"Hold {hold_id} expired before confirmation")
            raise HoldExpired()

        logger.info(f"Hold {hold_id} confirmed as booking {booking.pk} for invite {invite_id}")
        return booking.pk

    # ----- swaps -----------------------------------------------------------

    def can_swap(self, invite_id, new_venue_id, new_time_range: TimeRange) -> SwapEligibility:
        invite = DateInvite.objects.filter(pk=invite_id).first()
        if invite is None:
            return SwapEligibility(False, "Invite not found")
        booking = self.get_booking_for_invite(invite_id)
        return self._swap_verdict(invite, booking, new_venue_id, new_time_range, timezone.now())

    def execute_swap(
        self,
        invite_id,
        new_venue_id,
        new_time_range: TimeRange,
        new_proposed_date: date | None = None,
        new_proposed_time: time | None = None,
    ) -> None:
        with transaction.atomic():
            invite = _lock_queryset_if_possible(DateInvite.objects.filter(pk=invite_id)).first()
            if invite is None:
                raise NotFound("Invite not found")
            booking = _lock_queryset_if_possible(Booking.objects.filter(invite_id=invite_id)).first()
            self._lock_venue(new_venue_id)

            verdict = self._swap_verdict(invite, booking, new_venue_id, new_time_range, timezone.now())
            if not verdict.allowed:
                raise IneligibleOperation(verdict.message)

            # invite date and time are wall-clock fields in the inviter's zone
            local_start = new_time_range.start.astimezone(invite.inviter.tzinfo)
            invite.venue_id = new_venue_id
            invite.proposed_date = new_proposed_date or local_start.date()
            invite.proposed_time = new_proposed_time or local_start.time().replace(second=0, microsecond=0)
            invite.save(update_fields=["venue", "proposed_date", "proposed_time", "updated_at"])

            if booking is not None:
                booking.venue_id = new_venue_id
                booking.set_time_range(new_time_range)
                booking.save(update_fields=["venue", "starts_at", "ends_at", "updated_at"])

        logger.info(f"Invite {invite_id} moved to venue {new_venue_id} at {new_time_range}")

    def _swap_verdict(
        self, invite: DateInvite, booking: Booking | None, new_venue_id, new_time_range: TimeRange, now: datetime
    ) -> SwapEligibility:
        if invite.status not in SWAPPABLE_STATUSES:
            return SwapEligibility(False, "Only pending or accepted invites can be rescheduled")

        current_start = booking.starts_at if booking is not None else invite.proposed_start()
        if current_start - now < SWAP_CUTOFF:
            return SwapEligibility(False, "Swaps are not allowed within 24 hours of the event")

        if new_time_range.start <= now:
            return SwapEligibility(False, "The new time must be in the future")

        if not Venue.objects.filter(pk=new_venue_id, is_active=True).exists():
            return SwapEligibility(False, "Venue not found")

        exclude_booking_id = booking.pk if booking is not None else None
        if not self._venue_is_free(new_venue_id, new_time_range, now, exclude_booking_id=exclude_booking_id):
            return SwapEligibility(False, "The selected venue is not available at that time")

        return SwapEligibility(True, "Swap allowed")

    # ----- meet check-in ---------------------------------------------------

    def meet_form_window_open(self, invite_id) -> bool:
        invite = DateInvite.objects.filter(pk=invite_id).first()
        if invite is None:
            raise NotFound("Invite not found")
        booking = self.get_booking_for_invite(invite_id)
        start = booking.starts_at if booking is not None else invite.proposed_start()
        now = timezone.now()
        return start - MEET_FORM_OPENS_BEFORE <= now <= start + MEET_FORM_CLOSES_AFTER

    # ----- helpers ---------------------------------------------------------

    def _lock_venue(self, venue_id) -> Venue:
        venue = _lock_queryset_if_possible(Venue.objects.filter(pk=venue_id, is_active=True)).first()
        if venue is None:
            raise NotFound("Venue not found")
        return venue

    def _venue_is_free(self, venue_id, time_range: TimeRange, now: datetime, *, exclude_booking_id=None) -> bool:
        """No open unexpired hold and no booking overlaps the range at the venue."""
        holds = Hold.objects.filter(
            venue_id=venue_id,
            status=Hold.Status.OPEN,
            expires_at__gt=now,
            starts_at__lt=time_range.end,
            ends_at__gt=time_range.start,
        )
        bookings = Booking.objects.filter(
            venue_id=venue_id,
            starts_at__lt=time_range.end,
            ends_at__gt=time_range.start,
        )
        if exclude_booking_id is not None:
            bookings = bookings.exclude(pk=exclude_booking_id)
        return not holds.exists() and not bookings.exists()
