"""Celery tasks for outgoing notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from celery import shared_task  # type: ignore

from .services import send_venue_credit_email

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_venue_credit_email")
def send_venue_credit_email_task(
    recipient_email: str,
    code: str,
    venue_name: str,
    event_start_iso: str,
) -> bool:
    """Deliver a venue credit email; failures are logged by the sender."""
    event_start = datetime.fromisoformat(event_start_iso)
    sent = send_venue_credit_email(recipient_email, code, venue_name, event_start)
    if not sent:
        logger.warning(f"Venue credit email for code {code} was not delivered to {recipient_email}")
    return sent
