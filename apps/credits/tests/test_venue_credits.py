"""Venue credit issuance: idempotence, window and delivery."""

from __future__ import annotations

import re
from datetime import timedelta
from unittest import mock

import pytest
from django.core import mail
from django.utils import timezone

from apps.bookings.services import BookingConfirmation, HoldManager
from apps.credits.models import VenueCreditCode
from apps.credits.services import VenueCreditIssuer, generate_code, redemption_window
from apps.invites.models import DateInvite
from shared.domain.value_objects import TimeRange

CODE_RE = re.compile(r"^MEET-[A-Z0-9]{8}$")


@pytest.mark.django_db
def test_issue_creates_one_code_and_emails_both_parties(host, guest, make_invite) -> None:
    invite = make_invite()

    result = VenueCreditIssuer().issue(host, invite.pk)

    assert result.ok, result.error
    credit = VenueCreditCode.objects.get(invite=invite)
    assert CODE_RE.match(credit.code)
    assert sorted(message.to[0] for message in mail.outbox) == [guest.email, host.email]
    assert all(credit.code in message.body for message in mail.outbox)
    assert {message.subject for message in mail.outbox} == {"Your venue credit code"}


@pytest.mark.django_db
def test_repeated_issue_reuses_the_code(host, guest, make_invite) -> None:
    invite = make_invite()
    issuer = VenueCreditIssuer()

    issuer.issue(host, invite.pk)
    first_code = VenueCreditCode.objects.get(invite=invite).code
    issuer.issue(guest, invite.pk)

    assert VenueCreditCode.objects.filter(invite=invite).count() == 1
    assert len(mail.outbox) == 4
    assert all(first_code in message.body for message in mail.outbox)


@pytest.mark.django_db
def test_event_start_falls_back_to_invite_fields_as_utc(host, make_invite) -> None:
    invite = make_invite()

    VenueCreditIssuer().issue(host, invite.pk)

    credit = VenueCreditCode.objects.get(invite=invite)
    assert credit.event_start == invite.proposed_start()
    assert credit.venue_id == invite.venue_id


@pytest.mark.django_db
def test_event_start_taken_from_booking(host, guest, venue, other_venue, make_invite) -> None:
    invite = make_invite(venue=other_venue)
    start = (timezone.now() + timedelta(days=2)).replace(hour=20, minute=0, second=0, microsecond=0)
    booked = TimeRange.starting_at(start, 90)
    hold_id = HoldManager().create_hold(host.pk, guest.pk, venue.pk, booked)
    BookingConfirmation().confirm(hold_id, invite.pk)

    VenueCreditIssuer().issue(guest, invite.pk)

    credit = VenueCreditCode.objects.get(invite=invite)
    assert credit.event_start == booked.start
    assert credit.venue_id == venue.pk


@pytest.mark.django_db
def test_redemption_window_ends_before_the_event(host, make_invite) -> None:
    """
    The stored window runs from 3h to 2.5h before the event.

    The email promises validity "from 3 hours before your date until 30
    minutes after that", and the window closes 2.5 hours before the
    meeting begins. This test pins the stored behaviour so that any
    change to either side is deliberate.
    """
    invite = make_invite()

    VenueCreditIssuer().issue(host, invite.pk)

    credit = VenueCreditCode.objects.get(invite=invite)
    assert credit.valid_from == credit.event_start - timedelta(hours=3)
    assert credit.valid_until == credit.event_start - timedelta(hours=2, minutes=30)
    assert credit.valid_until < credit.event_start
    assert not credit.is_redeemable(now=credit.event_start)
    assert "until 30 minutes after that" in mail.outbox[0].alternatives[0][0]


def test_redemption_window_helper() -> None:
    start = timezone.now()
    assert redemption_window(start) == (start - timedelta(hours=3), start - timedelta(minutes=150))


@pytest.mark.django_db
def test_only_participants_can_request(make_user, make_invite) -> None:
    invite = make_invite()

    result = VenueCreditIssuer().issue(make_user(), invite.pk)

    assert result.code == "not_authorized"
    assert result.error == "Only participants can request the venue credit"
    assert not VenueCreditCode.objects.exists()
    assert mail.outbox == []


@pytest.mark.django_db
def test_missing_participant_email(host, guest, make_invite) -> None:
    invite = make_invite()
    type(guest).objects.filter(pk=guest.pk).update(email="")

    result = VenueCreditIssuer().issue(host, invite.pk)

    assert result.error == "Missing participant emails"
    assert result.code == "not_found"
    assert not VenueCreditCode.objects.exists()


@pytest.mark.django_db
def test_unknown_invite() -> None:
    result = VenueCreditIssuer().issue(1, 5555)
    assert result.code == "not_found"


@pytest.mark.django_db
def test_invite_without_venue_or_booking(host, make_invite) -> None:
    invite = make_invite()
    DateInvite.objects.filter(pk=invite.pk).update(venue=None)

    result = VenueCreditIssuer().issue(host, invite.pk)

    assert result.error == "Venue not found"


@pytest.mark.django_db
def test_dispatch_failure_does_not_fail_issue(host, make_invite) -> None:
    invite = make_invite()

    with mock.patch("apps.credits.services.send_venue_credit_email_task") as task:
        task.delay.side_effect = ConnectionError("broker down")
        result = VenueCreditIssuer().issue(host, invite.pk)

    assert result.ok
    assert task.delay.call_count == 2
    assert VenueCreditCode.objects.filter(invite=invite).exists()


@pytest.mark.django_db
def test_mail_backend_failure_is_swallowed(host, make_invite) -> None:
    invite = make_invite()

    with mock.patch("apps.notifications.services.send_mail", side_effect=OSError("smtp down")):
        result = VenueCreditIssuer().issue(host, invite.pk)

    assert result.ok
    assert mail.outbox == []


def test_generate_code_uses_prefix(settings) -> None:
    settings.VENUE_CREDIT_CODE_PREFIX = "PINT-"

    code = generate_code()

    assert code.startswith("PINT-")
    assert len(code) == len("PINT-") + 8
    assert generate_code(prefix="") != generate_code(prefix="")
