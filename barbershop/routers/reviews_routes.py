# barbershop/routers/reviews_routes.py

from typing import Optional

from fastapi import APIRouter, Depends

from barbershop.deps import get_actor, get_lifecycle, get_review_gate
from barbershop.lifecycle import AppointmentLifecycle
from barbershop.reviews import ReviewGate, average_rating
from barbershop.roles import Actor
from barbershop.schemas import ReviewCreate, ReviewEligibility, ReviewFeed, ReviewPublic

router = APIRouter(
    tags=["reviews"],
)


@router.get("/reviews", response_model=ReviewFeed)
async def list_reviews(
    service_type: Optional[str] = None,
    barber_name: Optional[str] = None,
    gate: ReviewGate = Depends(get_review_gate),
):
    reviews = await gate.list_reviews(service_type=service_type, barber_name=barber_name)
    return {
        "average_rating": average_rating(reviews),
        "count": len(reviews),
        "reviews": reviews,
    }


@router.get("/appointments/{appt_id}/review-eligibility", response_model=ReviewEligibility)
async def review_eligibility(
    appt_id: str,
    actor: Actor = Depends(get_actor),
    lifecycle: AppointmentLifecycle = Depends(get_lifecycle),
    gate: ReviewGate = Depends(get_review_gate),
):
    appointment = await lifecycle.get(actor, appt_id)
    eligible = actor.owns(appointment.owner_id) and await gate.can_review(appointment)
    return {"appointment_id": appointment.id, "can_review": eligible}


@router.post("/appointments/{appt_id}/reviews", response_model=ReviewPublic, status_code=201)
async def create_review(
    appt_id: str,
    review: ReviewCreate,
    actor: Actor = Depends(get_actor),
    gate: ReviewGate = Depends(get_review_gate),
):
    return await gate.submit(actor, appt_id, review.rating, review.comment)
