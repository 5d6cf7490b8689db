# barbershop/routers/chat_routes.py

from typing import Optional

from fastapi import APIRouter, Depends

from barbershop import chat
from barbershop.deps import get_lifecycle, get_optional_actor
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.roles import Actor
from barbershop.schemas import ChatReply, ChatRequest

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
)


@router.get("/welcome", response_model=ChatReply)
async def chat_welcome(actor: Optional[Actor] = Depends(get_optional_actor)):
    return {"reply": chat.welcome(actor)}


@router.post("", response_model=ChatReply)
async def chat_message(
    body: ChatRequest,
    actor: Optional[Actor] = Depends(get_optional_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
):
    return {"reply": await chat.reply(body.message, actor=actor, lifecycle=lifecycle)}
