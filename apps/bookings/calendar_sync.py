"""External calendar sync.

Fetches free slots from a party's public scheduling link. Cal.com
exposes a public availability endpoint; Calendly needs OAuth and iCal
feeds need full VEVENT parsing, so both currently yield no slots and
callers fall back to hourly candidates.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone as dt_timezone

import requests  # type: ignore
from django.conf import settings  # type: ignore

from apps.bookings.domain.errors import ExternalServiceFailure
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)

CAL_COM = "cal_com"
CALENDLY = "calendly"
ICAL = "ical"
UNKNOWN = "unknown"

CAL_COM_USERNAME_RE = re.compile(r"cal\.com/([^/?#]+)")

# Cal.com reports start times only
DEFAULT_SLOT_MINUTES = 60


def detect_calendar_provider(url: str) -> str:
    """Detect the calendar provider from a scheduling link."""
    if "cal.com" in url:
        return CAL_COM
    if "calendly.com" in url:
        return CALENDLY
    if ".ics" in url or "ical" in url:
        return ICAL
    return UNKNOWN


class ExternalCalendarClient:
    """Reads free slots from Cal.com, Calendly and iCal links."""

    def __init__(self, session: requests.Session | None = None, timeout: float | None = None):
        self.session = session or requests.Session()
        self.timeout = timeout or getattr(settings, "EXTERNAL_CALENDAR_TIMEOUT", 5)
        self.cal_com_api_url = getattr(settings, "CAL_COM_API_URL", "https://api.cal.com/v1")

    def fetch_free_slots(self, link: str, start: datetime, end: datetime) -> list[TimeRange]:
        """
        Free slots published by the link between ``start`` and ``end``

        Raises:
            ExternalServiceFailure: provider unreachable or answered garbage
        """
        if not link:
            return []

        provider = detect_calendar_provider(link)
        if provider == CAL_COM:
            return self._fetch_cal_com_slots(link, start, end)
        if provider == CALENDLY:
            logger.warning("Calendly availability requires OAuth, falling back to manual slots")
            return []
        if provider == ICAL:
            logger.warning("iCal feeds are not parsed yet, falling back to manual slots")
            return []

        logger.warning(f"Unknown calendar provider: {link}")
        return []

    def _fetch_cal_com_slots(self, link: str, start: datetime, end: datetime) -> list[TimeRange]:
        match = CAL_COM_USERNAME_RE.search(link)
        if not match:
            raise ExternalServiceFailure("Invalid Cal.com link")

        params = {
            "username": match.group(1),
            "dateFrom": start.isoformat(),
            "dateTo": end.isoformat(),
        }
        try:
            response = self.session.get(
                f"{self.cal_com_api_url}/availability",
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ExternalServiceFailure(f"Cal.com availability fetch failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise ExternalServiceFailure("Unexpected Cal.com availability payload")

        slots = []
        for item in payload.get("slots") or []:
            try:
                slot_start = datetime.fromisoformat(str(item["time"]).replace("Z", "+00:00"))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed Cal.com slot: {item!r}")
                continue
            if slot_start.tzinfo is None:
                slot_start = slot_start.replace(tzinfo=dt_timezone.utc)
            slots.append(TimeRange.starting_at(slot_start, DEFAULT_SLOT_MINUTES))

        logger.info(f"Fetched {len(slots)} Cal.com slots for {params['username']}")
        return slots
