"""Shared fixtures for the scheduling tests."""

from __future__ import annotations

from datetime import time, timedelta, timezone as dt_timezone
from decimal import Decimal
from itertools import count

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.finances.models import Wallet
from apps.invites.models import DateInvite
from apps.venues.models import Venue

_emails = count(1)


@pytest.fixture
def make_user(db):
    def factory(**kwargs):
        kwargs.setdefault("email", f"user{next(_emails)}@example.com")
        kwargs.setdefault("password", "StrongPass123")
        return get_user_model().objects.create_user(**kwargs)

    return factory


@pytest.fixture
def host(make_user):
    return make_user(email="host@example.com", first_name="Hana")


@pytest.fixture
def guest(make_user):
    return make_user(email="guest@example.com", first_name="Gabe")


@pytest.fixture
def venue(db):
    return Venue.objects.create(name="The Lamb", city="London", opens_at=time(9), closes_at=time(17))


@pytest.fixture
def other_venue(db):
    return Venue.objects.create(name="Blue Door Cafe", city="London", opens_at=time(8), closes_at=time(22))


@pytest.fixture
def make_invite(host, guest, venue):
    def factory(starts_in: timedelta = timedelta(days=10), **kwargs):
        start = (timezone.now() + starts_in).astimezone(dt_timezone.utc)
        kwargs.setdefault("inviter", host)
        kwargs.setdefault("invitee", guest)
        kwargs.setdefault("venue", venue)
        return DateInvite.objects.create(
            proposed_date=start.date(),
            proposed_time=start.time().replace(second=0, microsecond=0),
            **kwargs,
        )

    return factory


@pytest.fixture
def make_wallet(db):
    def factory(user, balance="5.00"):
        return Wallet.objects.create(user=user, balance=Decimal(balance))

    return factory
