"""Meet check-in window and form submission."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

import pytest
from django.core import mail

from apps.bookings.domain.entities import ServiceResult
from apps.bookings.domain.errors import NotFound
from apps.bookings.store import DjangoBookingStore
from apps.credits.models import VenueCreditCode
from apps.invites.models import MeetFormCompletion
from apps.invites.services import MEET_FORM_CLOSED_MESSAGE, submit_meet_form


@pytest.mark.django_db
@pytest.mark.parametrize(
    "starts_in, is_open",
    [
        (timedelta(minutes=10), True),
        (timedelta(minutes=-30), True),
        (timedelta(minutes=30), False),
        (timedelta(minutes=-90), False),
        (timedelta(days=2), False),
    ],
)
def test_meet_form_window(make_invite, starts_in, is_open) -> None:
    invite = make_invite(starts_in=starts_in)

    assert DjangoBookingStore().meet_form_window_open(invite.pk) is is_open


@pytest.mark.django_db
def test_meet_form_window_for_unknown_invite() -> None:
    with pytest.raises(NotFound):
        DjangoBookingStore().meet_form_window_open(8080)


@pytest.mark.django_db
def test_submit_records_completion_and_issues_credit(host, guest, make_invite) -> None:
    invite = make_invite(starts_in=timedelta(minutes=5))

    result = submit_meet_form(guest, invite.pk, {"rating": 5, "met": True})

    assert result.ok, result.error
    completion = MeetFormCompletion.objects.get(invite=invite, user=guest)
    assert completion.answers == {"rating": 5, "met": True}
    assert VenueCreditCode.objects.filter(invite=invite).exists()
    assert len(mail.outbox) == 2


@pytest.mark.django_db
def test_both_parties_share_one_code(host, guest, make_invite) -> None:
    invite = make_invite(starts_in=timedelta(minutes=-20))

    submit_meet_form(host, invite.pk, {})
    submit_meet_form(guest, invite.pk, {})
    submit_meet_form(guest, invite.pk, {"again": True})

    assert MeetFormCompletion.objects.filter(invite=invite).count() == 2
    assert MeetFormCompletion.objects.get(invite=invite, user=guest).answers == {}
    assert VenueCreditCode.objects.count() == 1


@pytest.mark.django_db
def test_submit_outside_window(host, make_invite) -> None:
    invite = make_invite(starts_in=timedelta(days=1))

    result = submit_meet_form(host, invite.pk, {})

    assert result.error == MEET_FORM_CLOSED_MESSAGE
    assert result.code == "ineligible"
    assert not MeetFormCompletion.objects.exists()


@pytest.mark.django_db
def test_submit_by_stranger(make_user, make_invite) -> None:
    invite = make_invite(starts_in=timedelta(minutes=5))

    result = submit_meet_form(make_user(), invite.pk, {})

    assert result.code == "not_authorized"
    assert not MeetFormCompletion.objects.exists()


@pytest.mark.django_db
def test_issuer_result_is_passed_through(host, make_invite) -> None:
    invite = make_invite(starts_in=timedelta(minutes=5))
    issuer = mock.Mock()
    issuer.issue.return_value = ServiceResult(error="Missing participant emails", code="not_found")

    result = submit_meet_form(host, invite.pk, {}, issuer=issuer)

    issuer.issue.assert_called_once_with(host.pk, invite.pk)
    assert result.error == "Missing participant emails"
