# barbershop/notifications.py

"""Appointment emails.

The lifecycle manager only enqueues payloads on an ``Outbox`` after its
write has been committed; the outbox is dispatched later (as a FastAPI
background task) and every delivery failure is logged and dropped.
"""

import html
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional

import resend
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .errors import NotificationError

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    confirmation = "confirmation"
    reminder = "reminder"
    status_change = "status_change"


class NotificationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str
    full_name: str = Field(alias="fullName")
    appointment_date: str = Field(alias="appointmentDate")
    appointment_time: str = Field(alias="appointmentTime")
    service_type: str = Field(alias="serviceType")
    status: str
    kind: NotificationKind = Field(alias="type")


@dataclass
class DeliveryResult:
    delivered: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: date) -> str:
    # e.g. "October 20th, 2026"
    return f"{value:%B} {_ordinal(value.day)}, {value.year}"


def kind_for_status(status: str) -> NotificationKind:
    if status == "confirmed":
        return NotificationKind.confirmation
    return NotificationKind.status_change


def compose_notification(
    appointment,
    recipient: str,
    status: Optional[str] = None,
    kind: Optional[NotificationKind] = None,
) -> NotificationPayload:
    status = status or appointment.status
    return NotificationPayload(
        to=recipient,
        full_name=appointment.full_name,
        appointment_date=format_long_date(appointment.appointment_date),
        appointment_time=appointment.appointment_time,
        service_type=appointment.service_type,
        status=status,
        kind=kind or kind_for_status(status),
    )


def _details(payload: NotificationPayload, with_status: bool = True) -> str:
    rows = [
        ("Service", payload.service_type),
        ("Date", payload.appointment_date),
        ("Time", payload.appointment_time),
    ]
    if with_status:
        rows.append(("Status", payload.status))
    lines = "".join(
        f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in rows
    )
    return (
        '<div style="background: #f5f5f5; padding: 20px; margin: 20px 0; border-radius: 8px;">'
        '<h2 style="margin-top: 0;">Appointment Details</h2>'
        f"{lines}</div>"
    )


def render_email(payload: NotificationPayload) -> tuple:
    """Return ``(subject, html)`` for a payload."""
    name = html.escape(payload.full_name)
    signature = "<p>Best regards,<br>The Barbershop Team</p>"

    if payload.kind is NotificationKind.confirmation:
        subject = "Appointment Confirmed - Barbershop"
        body = (
            f"<h1>Hello {name}!</h1><p>Your appointment has been confirmed.</p>"
            f"{_details(payload)}<p>We look forward to seeing you!</p>"
        )
    elif payload.kind is NotificationKind.reminder:
        subject = "Appointment Reminder - Barbershop"
        body = (
            f"<h1>Hello {name}!</h1><p>This is a reminder about your upcoming appointment.</p>"
            f"{_details(payload, with_status=False)}<p>We look forward to seeing you!</p>"
        )
    else:
        subject = f"Appointment {payload.status.capitalize()} - Barbershop"
        body = (
            f"<h1>Hello {name}!</h1>"
            f"<p>Your appointment status has been updated to: <strong>{html.escape(payload.status)}</strong></p>"
            f"{_details(payload)}<p>If you have any questions, please contact us.</p>"
        )
    return subject, body + signature


class ResendNotifier:
    """Sends appointment emails through Resend."""

    def __init__(self, api_key: Optional[str] = RESEND_API_KEY, from_address: str = EMAIL_FROM_ADDRESS):
        self.api_key = api_key
        self.from_address = from_address

    async def send(self, payload: NotificationPayload) -> DeliveryResult:
        if not self.api_key:
            raise NotificationError("RESEND_API_KEY is not configured", recipient=payload.to)

        subject, body = render_email(payload)
        params = {
            "from": self.from_address,
            "to": [payload.to],
            "subject": subject,
            "html": body,
        }
        resend.api_key = self.api_key
        try:
            response = await run_in_threadpool(resend.Emails.send, params)
        except Exception as exc:
            raise NotificationError(f"Resend rejected the email: {exc}", recipient=payload.to) from exc

        logger.info("Sent %s email to %s", payload.kind.value, payload.to)
        message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        return DeliveryResult(delivered=True, message_id=message_id)


class Outbox:
    def __init__(self, notifier=None):
        self.notifier = notifier
        self._pending: List[NotificationPayload] = []

    @property
    def pending(self) -> tuple:
        return tuple(self._pending)

    def enqueue(self, payload: NotificationPayload) -> None:
        self._pending.append(payload)

    async def dispatch(self) -> List[DeliveryResult]:
        batch, self._pending = self._pending, []
        results = []
        for payload in batch:
            if self.notifier is None:
                logger.warning("No notifier configured, dropping %s email to %s", payload.kind.value, payload.to)
                results.append(DeliveryResult(delivered=False, error="no notifier"))
                continue
            try:
                results.append(await self.notifier.send(payload))
            except Exception as exc:
                # delivery is best effort; the appointment write already happened
                logger.warning("Failed to send %s email to %s: %s", payload.kind.value, payload.to, exc)
                results.append(DeliveryResult(delivered=False, error=str(exc)))
        return results
