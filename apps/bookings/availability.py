"""Availability resolution for two-party meetings.

A party is busy during every accepted or completed professional meeting
request and social invite, whichever side of the relationship they
are on. Candidate slots come either from the counterpart's external
calendar (path A) or from whole hours across the venue's operating hours
(path B), and are filtered against the commitments of one or both
parties depending on the requested view.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Sequence

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Q  # type: ignore

from apps.invites.models import DateInvite, MeetingRequest
from shared.domain.value_objects import TimeRange

from .calendar_sync import ExternalCalendarClient
from .domain.entities import AvailabilityView, MeetingContext
from .domain.errors import ExternalServiceFailure, NotFound
from .domain.intervals import VenueHours, clip_to_hours, is_busy
from .models import Booking

logger = logging.getLogger(__name__)

CONFLICTING_INVITE_STATUSES = [DateInvite.Status.ACCEPTED, DateInvite.Status.COMPLETED]


def default_venue_hours() -> VenueHours:
    """Window used for hourly candidates when a venue publishes no hours."""
    opens_at = getattr(settings, "DEFAULT_VENUE_OPENS_AT", "09:00")
    closes_at = getattr(settings, "DEFAULT_VENUE_CLOSES_AT", "21:00")
    return VenueHours(time.fromisoformat(opens_at), time.fromisoformat(closes_at))


def load_party(party):
    """Accept a user or a user id."""
    if isinstance(party, get_user_model()):
        return party
    user = get_user_model().objects.filter(pk=party).first()
    if user is None:
        raise NotFound("Profile not found")
    return user


def get_conflicts(party, on_date: date) -> list[TimeRange]:
    """
    Busy intervals of a party on a calendar day

    Both relationship sources are checked in both directions: a party can
    be the sender or the receiver of a meeting request, the inviter or the
    invitee of a date invite. Invites store date and time separately; they
    are combined in the party's local time zone unless a booking exists,
    in which case the booking's range is used.
    """
    party = load_party(party)
    tz = party.tzinfo
    day_start = datetime.combine(on_date, time.min, tzinfo=tz)
    day_end = day_start + timedelta(days=1)

    conflicts: list[TimeRange] = []

    professional = MeetingRequest.objects.filter(
        Q(sender=party) | Q(receiver=party),
        status__in=[MeetingRequest.Status.ACCEPTED, MeetingRequest.Status.COMPLETED],
        proposed_time__gte=day_start,
        proposed_time__lt=day_end,
    ).only("proposed_time", "duration_minutes")
    for request in professional:
        conflicts.append(TimeRange.starting_at(request.proposed_time, request.effective_duration))

    social = DateInvite.objects.filter(
        Q(inviter=party) | Q(invitee=party),
        status__in=CONFLICTING_INVITE_STATUSES,
        proposed_date=on_date,
        booking__isnull=True,
    ).only("proposed_date", "proposed_time", "duration_minutes")
    for invite in social:
        conflicts.append(TimeRange.starting_at(invite.proposed_start(tz), invite.effective_duration))

    # a confirmed booking's range is authoritative over the invite fields
    booked = Booking.objects.filter(
        Q(invite__inviter=party) | Q(invite__invitee=party),
        invite__status__in=CONFLICTING_INVITE_STATUSES,
        starts_at__lt=day_end,
        ends_at__gt=day_start,
    ).only("starts_at", "ends_at")
    for booking in booked:
        conflicts.append(booking.time_range)

    return conflicts


def hourly_candidates(on_date: date, hours: VenueHours, tz) -> list[datetime]:
    """One candidate start per whole hour inside the operating window."""
    return [
        datetime.combine(on_date, time(hour), tzinfo=tz)
        for hour in range(hours.opens_at.hour, hours.closing_hour)
    ]


def filter_slots(
    candidates: Sequence[datetime],
    initiator_conflicts: Iterable[TimeRange],
    counterpart_conflicts: Iterable[TimeRange],
    hours: VenueHours | None,
    view: AvailabilityView,
    duration_minutes: int,
    buffer_minutes: int,
) -> list[datetime]:
    """Keep the candidates that are free from the requested perspective."""
    initiator_conflicts = list(initiator_conflicts)
    counterpart_conflicts = list(counterpart_conflicts)

    free = []
    for slot in clip_to_hours(candidates, hours):
        initiator_busy = is_busy(slot, duration_minutes, initiator_conflicts, buffer_minutes)
        counterpart_busy = is_busy(slot, duration_minutes, counterpart_conflicts, buffer_minutes)

        if view is AvailabilityView.INITIATOR_ONLY:
            available = not initiator_busy
        elif view is AvailabilityView.COUNTERPART_ONLY:
            available = not counterpart_busy
        else:
            available = not initiator_busy and not counterpart_busy

        if available:
            free.append(slot)
    return free


class AvailabilityResolver:
    """
    Computes candidate meeting start times for two parties

    Usage:
        resolver = AvailabilityResolver()
        slots = resolver.get_available_slots(
            counterpart, date(2025, 6, 1), MeetingContext.SOCIAL,
            initiator=request.user, venue_hours=venue.hours,
        )
    """

    def __init__(
        self,
        calendar_client: ExternalCalendarClient | None = None,
        buffer_minutes: int | None = None,
    ):
        self.calendar_client = calendar_client or ExternalCalendarClient()
        if buffer_minutes is None:
            buffer_minutes = getattr(settings, "AVAILABILITY_BUFFER_MINUTES", 15)
        self.buffer_minutes = buffer_minutes

    def get_conflicts(self, party, on_date: date) -> list[TimeRange]:
        return get_conflicts(party, on_date)

    def get_available_slots(
        self,
        counterpart,
        on_date: date,
        context: MeetingContext | str,
        initiator=None,
        venue_hours: VenueHours | None = None,
        view: AvailabilityView | str = AvailabilityView.MUTUAL,
        duration_minutes: int | None = None,
    ) -> list[datetime]:
        """
        Ordered candidate start times on ``on_date``

        The external calendar path is tried first when the counterpart has
        a link for the context; an empty result or a provider failure falls
        through to hourly candidates.
        """
        counterpart = load_party(counterpart)
        initiator = load_party(initiator) if initiator is not None else None
        context = MeetingContext(context)
        view = AvailabilityView(view)
        duration = duration_minutes or context.default_duration

        link = counterpart.calendar_link_for(context.value)
        if link:
            try:
                slots = self._calendar_slots(
                    link, counterpart, on_date, initiator, venue_hours, view, duration
                )
            except ExternalServiceFailure as exc:
                logger.warning(
                    f"External calendar fetch failed for user {counterpart.pk}, "
                    f"falling back to manual slots: {exc}"
                )
            else:
                if slots:
                    return slots
                logger.info(f"No external calendar slots for user {counterpart.pk} on {on_date}")

        return self._hourly_slots(counterpart, on_date, initiator, venue_hours, view, duration)

    def _calendar_slots(self, link, counterpart, on_date, initiator, venue_hours, view, duration):
        tz = counterpart.tzinfo
        day_start = datetime.combine(on_date, time.min, tzinfo=tz)
        day_end = day_start + timedelta(days=1)

        external = self.calendar_client.fetch_free_slots(link, day_start, day_end)
        candidates = sorted({slot.start.astimezone(tz) for slot in external})
        candidates = clip_to_hours(candidates, venue_hours)

        counterpart_conflicts = get_conflicts(counterpart, on_date)
        initiator_conflicts = get_conflicts(initiator, on_date) if initiator is not None else []

        return filter_slots(
            candidates,
            initiator_conflicts,
            counterpart_conflicts,
            venue_hours,
            view,
            duration,
            self.buffer_minutes,
        )

    def _hourly_slots(self, counterpart, on_date, initiator, venue_hours, view, duration):
        hours = venue_hours or default_venue_hours()
        candidates = hourly_candidates(on_date, hours, counterpart.tzinfo)

        counterpart_conflicts = get_conflicts(counterpart, on_date)
        initiator_conflicts = get_conflicts(initiator, on_date) if initiator is not None else []

        return filter_slots(
            candidates,
            initiator_conflicts,
            counterpart_conflicts,
            hours,
            view,
            duration,
            self.buffer_minutes,
        )
