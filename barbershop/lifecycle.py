# barbershop/lifecycle.py

"""Appointment lifecycle: every write to an appointment goes through here.

Status moves freely between the four statuses; there is no transition
graph, so ``completed -> pending`` is allowed. Whenever a write changes
the status an email is queued on the outbox, after the write committed.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .data import STATUSES
from .errors import NotAuthorizedError, RecordNotFoundError, StoreError, ValidationError
from .models import Appointment
from .notifications import NotificationKind, Outbox, compose_notification
from .roles import Actor
from .validation import APPOINTMENT_FIELDS, parse_date, validate_appointment, validate_status
from .visibility import filter_appointments, require_admin, require_mutation_rights, visible_to

logger = logging.getLogger(__name__)

ORDERING = ("appointment_date", "appointment_time")
UPCOMING_STATUSES = ("pending", "confirmed")


@dataclass
class UpdateResult:
    appointment: Appointment
    status_changed: bool
    previous_status: str


class AppointmentLifecycle:
    def __init__(self, store, outbox: Optional[Outbox] = None, today: Optional[Callable[[], date]] = None):
        self.store = store
        self.outbox = outbox if outbox is not None else Outbox()
        self._today = today or date.today

    def today(self) -> date:
        return self._today()

    async def create(self, actor: Actor, fields: dict) -> Appointment:
        if actor.id is None:
            raise NotAuthorizedError("Sign in to book an appointment")

        values = validate_appointment(fields, today=self.today())
        values["owner_id"] = actor.id
        values["status"] = "pending"

        record = await self.store.insert("appointments", values)
        logger.info("Appointment %s booked by user %s", record.id, actor.id)
        return record

    async def create_walk_in(self, actor: Actor, fields: dict, owner_id: Optional[int] = None) -> Appointment:
        """Admin booking, either unlinked (walk-in) or on behalf of ``owner_id``."""
        require_admin(actor)

        values = validate_appointment(fields, today=self.today())
        if owner_id is not None:
            try:
                await self.store.get("profiles", owner_id)
            except RecordNotFoundError:
                raise ValidationError("owner_id", f"No account with id {owner_id}") from None
        values["owner_id"] = owner_id
        values["status"] = "pending"

        record = await self.store.insert("appointments", values)
        logger.info("Appointment %s booked by admin %s for owner %s", record.id, actor.id, owner_id)
        return record

    async def update(self, actor: Actor, appointment_id: str, patch: dict) -> UpdateResult:
        current = await self.store.get("appointments", appointment_id)
        require_mutation_rights(actor, current)

        for key in patch:
            if key not in APPOINTMENT_FIELDS and key != "status":
                raise ValidationError(key, f"{key} cannot be changed")

        fields = dict(patch)
        keep_date = None
        if "appointment_date" in fields:
            requested = parse_date(fields["appointment_date"])
            # an unchanged date is not re-checked against today
            if requested == current.appointment_date:
                fields.pop("appointment_date")
                keep_date = requested

        values = validate_appointment(fields, partial=True, today=self.today())
        if keep_date is not None:
            values["appointment_date"] = keep_date
        if "status" in patch:
            values["status"] = validate_status(patch["status"])

        previous_status = current.status
        status_changed = "status" in values and values["status"] != previous_status

        if not values:
            return UpdateResult(current, False, previous_status)

        record = await self.store.update("appointments", appointment_id, values)
        if status_changed:
            logger.info(
                "Appointment %s status %s -> %s by user %s",
                appointment_id, previous_status, values["status"], actor.id,
            )
            await self._queue_notification(record, values["status"])
        return UpdateResult(record, status_changed, previous_status)

    async def transition_status(self, actor: Actor, appointment_id: str, new_status: str) -> UpdateResult:
        validate_status(new_status)
        return await self.update(actor, appointment_id, {"status": new_status})

    async def get(self, actor: Actor, appointment_id: str) -> Appointment:
        record = await self.store.get("appointments", appointment_id)
        require_mutation_rights(actor, record)
        return record

    async def delete(self, actor: Actor, appointment_id: str) -> None:
        current = await self.store.get("appointments", appointment_id)
        require_mutation_rights(actor, current)

        await self.store.delete("appointments", appointment_id)
        logger.info("Appointment %s deleted by user %s", appointment_id, actor.id)

    async def list_for(self, actor: Actor, status: str = "all") -> List[Appointment]:
        if actor.is_privileged:
            records = await self.store.query("appointments", order=ORDERING)
        elif actor.id is None:
            return []
        else:
            records = await self.store.query("appointments", {"owner_id": actor.id}, order=ORDERING)
        return filter_appointments(visible_to(actor, records), status=status)

    async def admin_list(
        self, actor: Actor, status: str = "all", search: Optional[str] = None
    ) -> List[Tuple[Appointment, Optional[str]]]:
        """All appointments with their owner's email, for the admin table."""
        require_admin(actor)
        records = await self.store.query("appointments", order=ORDERING)
        emails = await self._owner_emails(records)
        matches = filter_appointments(records, status=status, search=search, emails=emails)
        return [(record, emails.get(record.owner_id)) for record in matches]

    async def roster_records(self, actor: Actor) -> List[Appointment]:
        require_admin(actor)
        return await self.store.query("appointments")

    async def send_reminder(self, actor: Actor, appointment_id: str) -> bool:
        require_admin(actor)
        record = await self.store.get("appointments", appointment_id)
        return await self._queue_notification(record, record.status, kind=NotificationKind.reminder)

    async def next_appointment(self, actor: Actor) -> Optional[Appointment]:
        if actor.id is None:
            return None
        records = await self.store.query(
            "appointments",
            {
                "owner_id": actor.id,
                "appointment_date__gte": self.today(),
                "status__in": UPCOMING_STATUSES,
            },
            order=ORDERING,
            limit=1,
        )
        return records[0] if records else None

    async def _owner_emails(self, records) -> Dict[int, str]:
        owner_ids = {record.owner_id for record in records if record.owner_id is not None}
        if not owner_ids:
            return {}
        profiles = await self.store.query("profiles", {"id__in": owner_ids})
        return {profile.id: profile.email for profile in profiles}

    async def _queue_notification(self, record, status: str, kind: Optional[NotificationKind] = None) -> bool:
        if record.owner_id is None:
            logger.info("Appointment %s has no owner account, skipping email", record.id)
            return False
        try:
            profiles = await self.store.query("profiles", {"id": record.owner_id}, limit=1)
        except StoreError:
            # the appointment write already committed; only the email is lost
            logger.warning("Could not resolve email for appointment %s", record.id)
            return False
        if not profiles or not profiles[0].email:
            logger.info("Owner of appointment %s has no email, skipping", record.id)
            return False

        self.outbox.enqueue(compose_notification(record, profiles[0].email, status=status, kind=kind))
        return True


class AppointmentBoard:
    """The appointments an actor is looking at.

    ``records`` is replaced wholesale by ``refresh()`` after every
    mutation made through the board; it is never edited in place.
    """

    def __init__(self, lifecycle: AppointmentLifecycle, actor: Actor, status: str = "all"):
        if status != "all" and status not in STATUSES:
            raise ValidationError("status", "status must be 'all' or a valid appointment status")
        self.lifecycle = lifecycle
        self.actor = actor
        self.status = status
        self.records: Tuple[Appointment, ...] = ()

    async def refresh(self) -> Tuple[Appointment, ...]:
        self.records = tuple(await self.lifecycle.list_for(self.actor, status=self.status))
        return self.records

    async def create(self, fields: dict) -> Appointment:
        record = await self.lifecycle.create(self.actor, fields)
        await self.refresh()
        return record

    async def update(self, appointment_id: str, patch: dict) -> UpdateResult:
        result = await self.lifecycle.update(self.actor, appointment_id, patch)
        await self.refresh()
        return result

    async def transition_status(self, appointment_id: str, new_status: str) -> UpdateResult:
        result = await self.lifecycle.transition_status(self.actor, appointment_id, new_status)
        await self.refresh()
        return result

    async def delete(self, appointment_id: str) -> None:
        await self.lifecycle.delete(self.actor, appointment_id)
        await self.refresh()
