"""Email notifications sent by the scheduling core."""

from __future__ import annotations

import logging
from datetime import datetime

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import strip_tags  # type: ignore

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send one email, never raising.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template path (optional)
        context: Template context
        html_message: Pre-rendered HTML body (optional)

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def render_venue_credit_email(code: str, venue_name: str, event_start: datetime) -> str:
    """HTML body shared by both parties' venue credit emails."""
    date_time = event_start.strftime("%a %d %b, %H:%M")
    return f"""
    <html>
    <body>
        <h2>Your venue credit</h2>
        <p>Your unique code: <strong>{code}</strong></p>
        <p>Venue: <strong>{venue_name}</strong></p>
        <p>Date &amp; time: {date_time}</p>
        <p>This code is valid from 3 hours before your date until 30 minutes after that.
        Show the code and your profile or ID at the venue.</p>
    </body>
    </html>
    """


def send_venue_credit_email(
    recipient_email: str,
    code: str,
    venue_name: str,
    event_start: datetime,
) -> bool:
    """Email a venue credit code to one party of the meeting."""
    return send_email_notification(
        recipient_email=recipient_email,
        subject="Your venue credit code",
        template_name=None,
        context={"code": code, "venue_name": venue_name},
        html_message=render_venue_credit_email(code, venue_name, event_start),
    )
