# barbershop/routers/admin_routes.py

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends

from barbershop.deps import get_lifecycle, get_store, require_admin
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.roles import Actor
from barbershop.schemas import (
    AdminAppointment,
    AppointmentPublic,
    ReminderResult,
    RosterEntry,
    WalkInCreate,
)
from barbershop.store import RecordStore
from barbershop.visibility import roster

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@router.get("/appointments", response_model=List[AdminAppointment])
async def list_all_appointments(
    status: str = "all",
    search: Optional[str] = None,
    actor: Actor = Depends(require_admin),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    rows = await lifecycle.admin_list(actor, status=status, search=search)
    return [
        AdminAppointment(**record.model_dump(), owner_email=email)
        for record, email in rows
    ]


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
async def create_walk_in(
    appt: WalkInCreate,
    actor: Actor = Depends(require_admin),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    fields = appt.model_dump(exclude={"owner_id"})
    return await lifecycle.create_walk_in(actor, fields, owner_id=appt.owner_id)


@router.post("/appointments/{appt_id}/reminder", response_model=ReminderResult)
async def send_reminder(
    appt_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(require_admin),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    queued = await lifecycle.send_reminder(actor, appt_id)
    background_tasks.add_task(lifecycle.outbox.dispatch)
    return {"queued": queued}


@router.get("/users", response_model=List[RosterEntry])
async def list_users(
    actor: Actor = Depends(require_admin),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    store: RecordStore = Depends(get_store),
):
    profiles = await store.query("profiles", order=("-created_at",))
    records = await lifecycle.roster_records(actor)
    return roster(actor, profiles, records)
