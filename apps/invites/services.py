"""Post-meeting check-in."""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings.domain.entities import ServiceResult
from apps.bookings.domain.errors import IneligibleOperation, NotAuthorized, SchedulingError
from apps.bookings.store import BookingStore, DjangoBookingStore
from apps.credits.services import VenueCreditIssuer

from .models import MeetFormCompletion

logger = logging.getLogger(__name__)

MEET_FORM_CLOSED_MESSAGE = (
    "The meet form is only available 15 minutes before until 60 minutes after your date."
)


def submit_meet_form(
    caller,
    invite_id,
    answers: dict | None = None,
    store: BookingStore | None = None,
    issuer: VenueCreditIssuer | None = None,
) -> ServiceResult:
    """
    Record the caller's check-in and issue the venue credit

    A second submission by the same user keeps the first answers and
    simply re-runs the issuer, which reuses the existing code.
    """
    store = store or DjangoBookingStore()
    issuer = issuer or VenueCreditIssuer(store=store)
    caller_id = getattr(caller, "pk", caller)

    try:
        invite = store.get_invite(invite_id)
        if not invite.is_participant(caller_id):
            raise NotAuthorized("Only participants can submit the meet form")
        if not store.meet_form_window_open(invite_id):
            raise IneligibleOperation(MEET_FORM_CLOSED_MESSAGE)
    except SchedulingError as exc:
        logger.warning(f"Meet form for invite {invite_id} by user {caller_id} refused: {exc.message}")
        return ServiceResult.failure(exc)

    try:
        with transaction.atomic():
            _, created = MeetFormCompletion.objects.get_or_create(
                invite_id=invite_id,
                user_id=caller_id,
                defaults={"answers": answers or {}},
            )
    except IntegrityError:
        created = False
    if created:
        logger.info(f"Meet form for invite {invite_id} completed by user {caller_id}")

    return issuer.issue(caller_id, invite_id)
