"""Tests for email composition, rendering and the outbox."""

from datetime import date
from types import SimpleNamespace

import pytest
import resend

from barbershop.errors import NotificationError
from barbershop.notifications import (
    NotificationKind,
    NotificationPayload,
    Outbox,
    ResendNotifier,
    compose_notification,
    format_long_date,
    kind_for_status,
    render_email,
)


@pytest.fixture
def appointment():
    return SimpleNamespace(
        full_name="Jane <Doe>",
        appointment_date=date(2026, 10, 21),
        appointment_time="10:00",
        service_type="Men's Haircut",
        status="pending",
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2026, 10, 1), "October 1st, 2026"),
        (date(2026, 10, 2), "October 2nd, 2026"),
        (date(2026, 10, 3), "October 3rd, 2026"),
        (date(2026, 10, 11), "October 11th, 2026"),
        (date(2026, 10, 13), "October 13th, 2026"),
        (date(2026, 10, 22), "October 22nd, 2026"),
    ],
)
def test_long_date(value, expected):
    assert format_long_date(value) == expected


def test_kind_follows_new_status():
    assert kind_for_status("confirmed") is NotificationKind.confirmation
    assert kind_for_status("completed") is NotificationKind.status_change
    assert kind_for_status("canceled") is NotificationKind.status_change


def test_compose_uses_new_status(appointment):
    payload = compose_notification(appointment, "jane@example.com", status="confirmed")

    assert payload.kind is NotificationKind.confirmation
    assert payload.appointment_date == "October 21st, 2026"
    assert payload.model_dump(by_alias=True, mode="json") == {
        "to": "jane@example.com",
        "fullName": "Jane <Doe>",
        "appointmentDate": "October 21st, 2026",
        "appointmentTime": "10:00",
        "serviceType": "Men's Haircut",
        "status": "confirmed",
        "type": "confirmation",
    }


def test_render_status_change_escapes_html(appointment):
    payload = compose_notification(appointment, "jane@example.com", status="canceled")

    subject, body = render_email(payload)

    assert subject == "Appointment Canceled - Barbershop"
    assert "Jane &lt;Doe&gt;" in body
    assert "<strong>canceled</strong>" in body


def test_render_reminder_has_no_status_line(appointment):
    payload = compose_notification(appointment, "jane@example.com", kind=NotificationKind.reminder)

    subject, body = render_email(payload)

    assert subject == "Appointment Reminder - Barbershop"
    assert "Status:" not in body


@pytest.mark.asyncio
async def test_outbox_without_notifier_drops_payloads(appointment):
    outbox = Outbox()
    outbox.enqueue(compose_notification(appointment, "jane@example.com"))

    [result] = await outbox.dispatch()

    assert result.delivered is False
    assert outbox.pending == ()


@pytest.mark.asyncio
async def test_outbox_keeps_going_after_a_failure(appointment, notifier):
    class FlakyNotifier:
        def __init__(self):
            self.calls = 0

        async def send(self, payload):
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("connection reset")
            return await notifier.send(payload)

    outbox = Outbox(FlakyNotifier())
    outbox.enqueue(compose_notification(appointment, "first@example.com"))
    outbox.enqueue(compose_notification(appointment, "second@example.com"))

    results = await outbox.dispatch()

    assert [r.delivered for r in results] == [False, True]
    assert [p.to for p in notifier.sent] == ["second@example.com"]


@pytest.mark.asyncio
async def test_resend_notifier_sends(monkeypatch, appointment):
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": "email_123"}

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    notifier = ResendNotifier(api_key="re_test", from_address="Shop <shop@example.com>")

    result = await notifier.send(compose_notification(appointment, "jane@example.com", status="confirmed"))

    assert result.delivered is True
    assert result.message_id == "email_123"
    [params] = sent
    assert params["to"] == ["jane@example.com"]
    assert params["from"] == "Shop <shop@example.com>"
    assert params["subject"] == "Appointment Confirmed - Barbershop"


@pytest.mark.asyncio
async def test_resend_errors_become_notification_errors(monkeypatch, appointment):
    def fake_send(params):
        raise ValueError("invalid api key")

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    notifier = ResendNotifier(api_key="re_bad")

    with pytest.raises(NotificationError):
        await notifier.send(compose_notification(appointment, "jane@example.com"))


@pytest.mark.asyncio
async def test_resend_without_key(appointment):
    with pytest.raises(NotificationError):
        await ResendNotifier(api_key=None).send(compose_notification(appointment, "jane@example.com"))


def test_payload_accepts_wire_names():
    payload = NotificationPayload.model_validate(
        {
            "to": "jane@example.com",
            "fullName": "Jane",
            "appointmentDate": "October 21st, 2026",
            "appointmentTime": "10:00",
            "serviceType": "Beard Trim",
            "status": "completed",
            "type": "status_change",
        }
    )

    assert payload.kind is NotificationKind.status_change
