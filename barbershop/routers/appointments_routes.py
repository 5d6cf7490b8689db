# barbershop/routers/appointments_routes.py

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from barbershop.deps import get_actor, get_lifecycle, get_review_gate
from barbershop.lifecycle import AppointmentLifecycle, UpdateResult
from barbershop.reviews import ReviewGate
from barbershop.roles import Actor
from barbershop.schemas import (
    AppointmentChange,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentUpdate,
    DashboardEntry,
    StatusUpdate,
)

router = APIRouter(
    tags=["appointments"],
)


def _change(result: UpdateResult) -> AppointmentChange:
    return AppointmentChange(
        appointment=AppointmentPublic.model_validate(result.appointment.model_dump()),
        status_changed=result.status_changed,
        previous_status=result.previous_status,
    )


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
async def create_appointment(
    appt: AppointmentCreate,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.create(actor, appt.model_dump())


@router.get("/appointments", response_model=List[AppointmentPublic])
async def list_appointments(
    status: str = "all",
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    # own appointments for customers, everything for admins
    return await lifecycle.list_for(actor, status=status)


@router.get("/appointments/{appt_id}", response_model=AppointmentPublic)
async def get_appointment(
    appt_id: str,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.get(actor, appt_id)


@router.patch("/appointments/{appt_id}", response_model=AppointmentChange)
async def update_appointment(
    appt_id: str,
    changes: AppointmentUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    result = await lifecycle.update(actor, appt_id, changes.model_dump(exclude_unset=True))
    background_tasks.add_task(lifecycle.outbox.dispatch)
    return _change(result)


@router.put("/appointments/{appt_id}/status", response_model=AppointmentChange)
async def update_appointment_status(
    appt_id: str,
    body: StatusUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    result = await lifecycle.transition_status(actor, appt_id, body.status)
    background_tasks.add_task(lifecycle.outbox.dispatch)
    return _change(result)


@router.delete("/appointments/{appt_id}", status_code=204)
async def delete_appointment(
    appt_id: str,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    await lifecycle.delete(actor, appt_id)
    return Response(status_code=204)


@router.get("/dashboard", response_model=List[DashboardEntry])
async def dashboard(
    status: str = "all",
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    gate: ReviewGate = Depends(get_review_gate),
):
    appointments = await lifecycle.list_for(actor, status=status)
    reviewed = await gate.reviewed_appointment_ids(actor.id)

    entries = []
    for appointment in appointments:
        entries.append(
            DashboardEntry(
                appointment=AppointmentPublic.model_validate(appointment.model_dump()),
                reviewed=appointment.id in reviewed,
                can_review=appointment.status == "completed"
                and actor.owns(appointment.owner_id)
                and appointment.id not in reviewed,
            )
        )
    return entries
