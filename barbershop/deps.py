# barbershop/deps.py

from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from .auth import get_current_user, get_optional_user
from .db import get_session
from .lifecycle import AppointmentLifecycle
from .notifications import Outbox
from .reviews import ReviewGate
from .roles import Actor, RoleLookup
from .store import RecordStore


def get_store(session: Session = Depends(get_session)) -> RecordStore:
    return RecordStore(session)


def get_notifier(request: Request):
    return getattr(request.app.state, "notifier", None)


# one outbox per request, dispatched as a background task by the route
def get_outbox(notifier=Depends(get_notifier)) -> Outbox:
    return Outbox(notifier)


def get_lifecycle(
    store: RecordStore = Depends(get_store),
    outbox: Outbox = Depends(get_outbox),
) -> AppointmentLifecycle:
    return AppointmentLifecycle(store, outbox)


def get_review_gate(store: RecordStore = Depends(get_store)) -> ReviewGate:
    return ReviewGate(store)


async def get_actor(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
) -> Actor:
    return await RoleLookup(store).actor_for(current_user["id"], current_user["email"])


async def get_optional_actor(
    current_user: Optional[dict] = Depends(get_optional_user),
    store: RecordStore = Depends(get_store),
) -> Optional[Actor]:
    if current_user is None:
        return None
    return await RoleLookup(store).actor_for(current_user["id"], current_user["email"])


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_privileged:
        raise HTTPException(status_code=403, detail="Forbidden")
    return actor
