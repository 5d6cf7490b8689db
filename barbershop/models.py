# barbershop/models.py

import uuid
from typing import Optional
from datetime import datetime, timezone, date as Date

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    full_name: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class UserRole(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="user.id")
    role: str  # only "admin" is meaningful


class Appointment(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)

    # None for walk-ins booked by an admin
    owner_id: Optional[int] = Field(default=None, index=True, foreign_key="user.id")
    full_name: str
    service_type: str
    appointment_date: Date = Field(index=True)
    appointment_time: str
    status: str = "pending"
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))


class Review(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("appointment_id", "owner_id", name="uq_review_per_appointment"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # relation only; deleting the appointment keeps the review
    appointment_id: str = Field(index=True)
    owner_id: int = Field(index=True, foreign_key="user.id")
    barber_name: str
    service_type: str = Field(index=True)
    rating: int
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))
