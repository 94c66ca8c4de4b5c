"""Availability resolution: conflicts, perspectives and the calendar fallback."""

from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone
from unittest import mock

import pytest
import requests

from apps.bookings.availability import AvailabilityResolver, get_conflicts
from apps.bookings.calendar_sync import (
    CAL_COM,
    CALENDLY,
    ICAL,
    UNKNOWN,
    ExternalCalendarClient,
    detect_calendar_provider,
)
from apps.bookings.domain.entities import AvailabilityView, MeetingContext
from apps.bookings.domain.errors import ExternalServiceFailure, NotFound
from apps.bookings.domain.intervals import VenueHours
from apps.invites.models import DateInvite, MeetingRequest
from shared.domain.value_objects import TimeRange

# A winter day keeps London wall-clock time equal to UTC.
DAY = date(2030, 1, 15)
UTC = dt_timezone.utc
WORKING_HOURS = VenueHours(time(9), time(17))


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2030, 1, 15, hour, minute, tzinfo=UTC)


def offline_resolver() -> AvailabilityResolver:
    client = mock.Mock(spec=ExternalCalendarClient)
    client.fetch_free_slots.return_value = []
    return AvailabilityResolver(calendar_client=client)


@pytest.mark.django_db
def test_hourly_fallback_without_calendar(host, guest) -> None:
    slots = offline_resolver().get_available_slots(
        guest, DAY, MeetingContext.SOCIAL, initiator=host, venue_hours=WORKING_HOURS
    )

    assert [slot.hour for slot in slots] == list(range(9, 17))
    assert len(slots) == 8


@pytest.mark.django_db
def test_default_hours_used_when_venue_publishes_none(host, guest) -> None:
    slots = offline_resolver().get_available_slots(guest, DAY, "social", initiator=host)

    assert [slot.hour for slot in slots] == list(range(9, 21))


@pytest.mark.django_db
def test_counterpart_commitment_blocks_buffered_slots(host, guest, make_user) -> None:
    colleague = make_user()
    MeetingRequest.objects.create(
        sender=colleague,
        receiver=guest,
        proposed_time=at(14),
        duration_minutes=90,
        status=MeetingRequest.Status.ACCEPTED,
    )

    slots = offline_resolver().get_available_slots(
        guest,
        DAY,
        MeetingContext.BUSINESS,
        initiator=host,
        venue_hours=WORKING_HOURS,
    )

    hours = [slot.hour for slot in slots]
    assert 15 not in hours
    assert 13 not in hours and 14 not in hours
    assert hours == [9, 10, 11, 12, 16]


@pytest.mark.django_db
def test_pending_and_declined_requests_do_not_block(host, guest) -> None:
    MeetingRequest.objects.create(sender=host, receiver=guest, proposed_time=at(10))
    MeetingRequest.objects.create(
        sender=guest, receiver=host, proposed_time=at(12), status=MeetingRequest.Status.DECLINED
    )

    assert get_conflicts(guest, DAY) == []


@pytest.mark.django_db
def test_completed_meeting_request_still_blocks(host, guest) -> None:
    MeetingRequest.objects.create(
        sender=host, receiver=guest, proposed_time=at(15), status=MeetingRequest.Status.COMPLETED
    )

    assert get_conflicts(guest, DAY) == [TimeRange(at(15), at(16))]


@pytest.mark.django_db
def test_conflicts_cover_both_sides_of_each_relationship(host, guest, make_user) -> None:
    other = make_user()
    MeetingRequest.objects.create(
        sender=guest, receiver=other, proposed_time=at(9), status=MeetingRequest.Status.ACCEPTED
    )
    DateInvite.objects.create(
        inviter=other,
        invitee=guest,
        proposed_date=DAY,
        proposed_time=time(18),
        status=DateInvite.Status.ACCEPTED,
    )
    DateInvite.objects.create(
        inviter=guest,
        invitee=host,
        proposed_date=DAY,
        proposed_time=time(12),
        duration_minutes=45,
        status=DateInvite.Status.COMPLETED,
    )

    conflicts = sorted(get_conflicts(guest, DAY), key=lambda tr: tr.start)

    assert conflicts == [
        TimeRange(at(9), at(10)),
        TimeRange(at(12), at(12, 45)),
        TimeRange(at(18), at(19, 30)),
    ]


@pytest.mark.django_db
def test_invites_read_in_party_time_zone(make_user, guest) -> None:
    traveller = make_user(time_zone="America/New_York")
    DateInvite.objects.create(
        inviter=traveller,
        invitee=guest,
        proposed_date=DAY,
        proposed_time=time(10),
        status=DateInvite.Status.ACCEPTED,
    )

    (conflict,) = get_conflicts(traveller, DAY)

    assert conflict.start.astimezone(UTC) == at(15)


@pytest.mark.django_db
def test_perspective_selects_whose_conflicts_apply(host, guest, make_user) -> None:
    friend = make_user()
    DateInvite.objects.create(
        inviter=friend,
        invitee=host,
        proposed_date=DAY,
        proposed_time=time(10),
        status=DateInvite.Status.ACCEPTED,
    )
    resolver = offline_resolver()

    def hours_for(view: AvailabilityView) -> list[int]:
        slots = resolver.get_available_slots(
            guest, DAY, MeetingContext.SOCIAL, initiator=host, venue_hours=WORKING_HOURS, view=view
        )
        return [slot.hour for slot in slots]

    assert 10 not in hours_for(AvailabilityView.MUTUAL)
    assert 10 not in hours_for(AvailabilityView.INITIATOR_ONLY)
    assert hours_for(AvailabilityView.COUNTERPART_ONLY) == list(range(9, 17))


@pytest.mark.django_db
def test_calendar_failure_falls_back_to_hourly_slots(host, make_user) -> None:
    counterpart = make_user(calendar_link_social="https://cal.com/alex")
    client = mock.Mock(spec=ExternalCalendarClient)
    client.fetch_free_slots.side_effect = ExternalServiceFailure("Cal.com is down")

    slots = AvailabilityResolver(calendar_client=client).get_available_slots(
        counterpart, DAY, MeetingContext.SOCIAL, initiator=host, venue_hours=WORKING_HOURS
    )

    client.fetch_free_slots.assert_called_once()
    assert [slot.hour for slot in slots] == list(range(9, 17))


@pytest.mark.django_db
def test_calendar_slots_are_clipped_and_filtered(host, make_user) -> None:
    counterpart = make_user(calendar_link_business="https://cal.com/alex/30min")
    MeetingRequest.objects.create(
        sender=host,
        receiver=make_user(),
        proposed_time=at(11),
        status=MeetingRequest.Status.ACCEPTED,
    )
    client = mock.Mock(spec=ExternalCalendarClient)
    client.fetch_free_slots.return_value = [
        TimeRange.starting_at(at(hour), 60) for hour in (8, 11, 14, 14, 10)
    ]

    slots = AvailabilityResolver(calendar_client=client).get_available_slots(
        counterpart, DAY, "business", initiator=host, venue_hours=WORKING_HOURS
    )

    # 08:00 is before opening, 10:00 and 11:00 clash with the host, 14:00 is deduplicated
    assert slots == [at(14)]


@pytest.mark.django_db
def test_business_context_uses_business_link(make_user) -> None:
    counterpart = make_user(calendar_link_social="https://cal.com/social-alex")
    client = mock.Mock(spec=ExternalCalendarClient)

    offline = AvailabilityResolver(calendar_client=client)
    offline.get_available_slots(counterpart, DAY, MeetingContext.BUSINESS, venue_hours=WORKING_HOURS)

    client.fetch_free_slots.assert_not_called()


@pytest.mark.django_db
def test_unknown_counterpart_is_not_found() -> None:
    with pytest.raises(NotFound):
        offline_resolver().get_available_slots(999999, DAY, MeetingContext.SOCIAL)


def test_detect_calendar_provider() -> None:
    assert detect_calendar_provider("https://cal.com/alex") == CAL_COM
    assert detect_calendar_provider("https://calendly.com/alex/coffee") == CALENDLY
    assert detect_calendar_provider("https://example.com/alex.ics") == ICAL
    assert detect_calendar_provider("https://example.com/alex") == UNKNOWN


def test_cal_com_client_parses_slots() -> None:
    session = mock.Mock(spec=requests.Session)
    session.get.return_value.json.return_value = {
        "slots": [
            {"time": "2030-01-15T10:00:00Z"},
            {"time": "2030-01-15T13:00:00"},
            {"unexpected": True},
        ]
    }
    client = ExternalCalendarClient(session=session, timeout=2)

    slots = client.fetch_free_slots("https://cal.com/alex", at(0), at(23))

    assert slots == [TimeRange.starting_at(at(10), 60), TimeRange.starting_at(at(13), 60)]
    _, kwargs = session.get.call_args
    assert kwargs["params"]["username"] == "alex"
    assert kwargs["timeout"] == 2


def test_cal_com_client_wraps_network_errors() -> None:
    session = mock.Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(ExternalServiceFailure):
        ExternalCalendarClient(session=session).fetch_free_slots("https://cal.com/alex", at(0), at(23))


def test_calendly_links_yield_no_slots() -> None:
    session = mock.Mock(spec=requests.Session)
    client = ExternalCalendarClient(session=session)

    assert client.fetch_free_slots("https://calendly.com/alex", at(0), at(23)) == []
    session.get.assert_not_called()
