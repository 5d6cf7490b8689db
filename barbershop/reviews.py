# barbershop/reviews.py

from typing import Iterable, List, Optional, Set

from .errors import DuplicateRecordError, NotAuthorizedError, NotEligibleError
from .models import Review
from .roles import Actor
from .validation import validate_review


class ReviewGate:
    """One review per completed appointment, by the appointment's owner.

    Eligibility is always re-read from the store at submission time. The
    unique (appointment_id, owner_id) constraint on the reviews table
    catches two sessions submitting at once.
    """

    def __init__(self, store):
        self.store = store

    async def _ineligibility(self, appointment) -> Optional[str]:
        if appointment.status != "completed":
            return "Only completed appointments can be reviewed"
        if appointment.owner_id is None:
            return "This appointment is not linked to an account"
        existing = await self.store.query(
            "reviews",
            {"appointment_id": appointment.id, "owner_id": appointment.owner_id},
            limit=1,
        )
        if existing:
            return "This appointment has already been reviewed"
        return None

    async def can_review(self, appointment) -> bool:
        return await self._ineligibility(appointment) is None

    async def submit(self, actor: Actor, appointment_id: str, rating, comment: Optional[str] = None) -> Review:
        rating, comment = validate_review(rating, comment)

        current = await self.store.get("appointments", appointment_id)
        if not actor.owns(current.owner_id):
            raise NotAuthorizedError("You can only review your own appointments")

        reason = await self._ineligibility(current)
        if reason:
            raise NotEligibleError(reason)

        try:
            return await self.store.insert(
                "reviews",
                {
                    "appointment_id": current.id,
                    "owner_id": current.owner_id,
                    "barber_name": current.full_name,
                    "service_type": current.service_type,
                    "rating": rating,
                    "comment": comment,
                },
            )
        except DuplicateRecordError as exc:
            raise NotEligibleError("This appointment has already been reviewed") from exc

    async def reviewed_appointment_ids(self, owner_id: int) -> Set[str]:
        reviews = await self.store.query("reviews", {"owner_id": owner_id})
        return {review.appointment_id for review in reviews}

    async def list_reviews(
        self, service_type: Optional[str] = None, barber_name: Optional[str] = None
    ) -> List[Review]:
        filters = {}
        if service_type:
            filters["service_type"] = service_type
        if barber_name:
            filters["barber_name"] = barber_name
        return await self.store.query("reviews", filters, order=("-created_at",))


def average_rating(reviews: Iterable[Review]) -> Optional[float]:
    ratings = [review.rating for review in reviews]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 1)
