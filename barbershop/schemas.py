# barbershop/schemas.py

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Dict, List, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserPublic(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    is_admin: bool = False


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    full_name: Optional[str] = Field(default=None, max_length=100)


# Field rules (length, catalogue, future date) are enforced by the
# lifecycle manager so every surface reports them the same way.
class AppointmentCreate(BaseModel):
    full_name: str
    service_type: str
    appointment_date: date
    appointment_time: str
    notes: Optional[str] = None


class WalkInCreate(AppointmentCreate):
    owner_id: Optional[int] = None


class AppointmentUpdate(BaseModel):
    full_name: Optional[str] = None
    service_type: Optional[str] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str


class AppointmentPublic(BaseModel):
    id: str
    owner_id: Optional[int] = None
    full_name: str
    service_type: str
    appointment_date: date
    appointment_time: str
    status: str
    notes: Optional[str] = None
    created_at: datetime


class AdminAppointment(AppointmentPublic):
    owner_email: Optional[str] = None


class AppointmentChange(BaseModel):
    appointment: AppointmentPublic
    status_changed: bool
    previous_status: str


class DashboardEntry(BaseModel):
    appointment: AppointmentPublic
    reviewed: bool
    can_review: bool


class RosterEntry(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    created_at: datetime
    appointments: Dict[str, int]


class ReviewCreate(BaseModel):
    rating: int
    comment: Optional[str] = None


class ReviewPublic(BaseModel):
    id: int
    appointment_id: str
    barber_name: str
    service_type: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class ReviewFeed(BaseModel):
    average_rating: Optional[float] = None
    count: int
    reviews: List[ReviewPublic]


class ReviewEligibility(BaseModel):
    appointment_id: str
    can_review: bool


class ReminderResult(BaseModel):
    queued: bool


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=1000)


class ChatReply(BaseModel):
    reply: str
