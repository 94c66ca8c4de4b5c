"""
Venue Credit Issuer

Issues the redemption code both parties show at the venue. A code is
created at most once per invite; repeated requests reuse it and resend
the same email to both parties.

The redemption window is computed as three hours before the event start
until two and a half hours before it. The wording of the email describes
a longer window; the computed values are what gets stored.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone as dt_timezone

from django.conf import settings  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings.domain.entities import ServiceResult
from apps.bookings.domain.errors import NotAuthorized, NotFound, SchedulingError
from apps.bookings.store import BookingStore, DjangoBookingStore
from apps.invites.models import DateInvite
from apps.notifications.tasks import send_venue_credit_email_task
from shared.domain.value_objects import TimeRange

from .models import VenueCreditCode

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8

VALID_FROM_OFFSET = timedelta(hours=3)
VALID_UNTIL_OFFSET = timedelta(hours=2, minutes=30)


def generate_code(prefix: str | None = None) -> str:
    if prefix is None:
        prefix = getattr(settings, "VENUE_CREDIT_CODE_PREFIX", "MEET-")
    return prefix + "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def redemption_window(event_start: datetime) -> tuple[datetime, datetime]:
    return event_start - VALID_FROM_OFFSET, event_start - VALID_UNTIL_OFFSET


class VenueCreditIssuer:
    """Creates or reuses an invite's venue credit code and emails it."""

    def __init__(self, store: BookingStore | None = None):
        self.store = store or DjangoBookingStore()

    def issue(self, caller, invite_id) -> ServiceResult:
        caller_id = getattr(caller, "pk", caller)
        try:
            invite = self.store.get_invite(invite_id)
            if not invite.is_participant(caller_id):
                raise NotAuthorized("Only participants can request the venue credit")
            if not invite.inviter.email or not invite.invitee.email:
                raise NotFound("Missing participant emails")

            event_start, venue = self._event_of(invite)
            credit = self._get_or_create_code(invite, venue, event_start)
        except SchedulingError as exc:
            logger.warning(f"Venue credit for invite {invite_id} refused: {exc.message}")
            return ServiceResult.failure(exc)

        for recipient in (invite.inviter.email, invite.invitee.email):
            self._dispatch(recipient, credit)
        return ServiceResult()

    def _event_of(self, invite: DateInvite):
        """Event start and venue, taken from the booking when there is one."""
        booking = self.store.get_booking_for_invite(invite.pk)
        if booking is not None:
            return TimeRange.parse(booking.time_slot).start, booking.venue
        if invite.venue is None:
            raise NotFound("Venue not found")
        return invite.proposed_start(dt_timezone.utc), invite.venue

    def _get_or_create_code(self, invite: DateInvite, venue, event_start: datetime) -> VenueCreditCode:
        existing = VenueCreditCode.objects.select_related("venue").filter(invite=invite).first()
        if existing is not None:
            logger.info(f"Reusing venue credit {existing.code} for invite {invite.pk}")
            return existing

        valid_from, valid_until = redemption_window(event_start)
        try:
            with transaction.atomic():
                credit = VenueCreditCode.objects.create(
                    invite=invite,
                    venue=venue,
                    code=generate_code(),
                    event_start=event_start,
                    valid_from=valid_from,
                    valid_until=valid_until,
                )
        except IntegrityError:
            credit = VenueCreditCode.objects.select_related("venue").filter(invite=invite).first()
            if credit is None:
                raise
            logger.info(f"Concurrent venue credit for invite {invite.pk}, using {credit.code}")
            return credit

        logger.info(f"Issued venue credit {credit.code} for invite {invite.pk} at venue {venue.pk}")
        return credit

    def _dispatch(self, recipient: str, credit: VenueCreditCode) -> None:
        try:
            send_venue_credit_email_task.delay(
                recipient,
                credit.code,
                credit.venue.name,
                credit.event_start.isoformat(),
            )
        except Exception as exc:
            logger.error(f"Could not dispatch venue credit email to {recipient}: {exc}", exc_info=True)
