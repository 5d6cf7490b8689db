"""Shared test fixtures: in-memory database, store, fake notifier and accounts."""
from __future__ import annotations

import os
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Ensure the project root is available on sys.path so tests can import the barbershop package.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from barbershop import models  # noqa: E402,F401
from barbershop.data import ADMIN_ROLE  # noqa: E402
from barbershop.errors import NotificationError  # noqa: E402
from barbershop.lifecycle import AppointmentLifecycle  # noqa: E402
from barbershop.models import User, UserRole  # noqa: E402
from barbershop.notifications import DeliveryResult, Outbox  # noqa: E402
from barbershop.reviews import ReviewGate  # noqa: E402
from barbershop.roles import DEFAULT, PRIVILEGED, Actor  # noqa: E402
from barbershop.store import RecordStore  # noqa: E402


class RecordingNotifier:
    """Collects payloads instead of emailing them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, payload):
        if self.fail:
            raise NotificationError("mail service unavailable", recipient=payload.to)
        self.sent.append(payload)
        return DeliveryResult(delivered=True, message_id=f"msg-{len(self.sent)}")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def store(session) -> RecordStore:
    return RecordStore(session)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def outbox(notifier) -> Outbox:
    return Outbox(notifier)


@pytest.fixture
def lifecycle(store, outbox) -> AppointmentLifecycle:
    return AppointmentLifecycle(store, outbox)


@pytest.fixture
def gate(store) -> ReviewGate:
    return ReviewGate(store)


def add_user(session, email: str, full_name: str = None, admin: bool = False, password_hash: str = "not-a-hash") -> User:
    user = User(email=email, password_hash=password_hash, full_name=full_name)
    session.add(user)
    session.commit()
    session.refresh(user)
    if admin:
        session.add(UserRole(user_id=user.id, role=ADMIN_ROLE))
        session.commit()
    return user


@pytest.fixture
def customer_user(session) -> User:
    return add_user(session, "jane@example.com", full_name="Jane Doe")


@pytest.fixture
def other_user(session) -> User:
    return add_user(session, "bob@example.com", full_name="Bob Smith")


@pytest.fixture
def admin_user(session) -> User:
    return add_user(session, "owner@elitecuts.com", full_name="Shop Owner", admin=True)


@pytest.fixture
def customer(customer_user) -> Actor:
    return Actor(id=customer_user.id, email=customer_user.email, capability=DEFAULT)


@pytest.fixture
def other_customer(other_user) -> Actor:
    return Actor(id=other_user.id, email=other_user.email, capability=DEFAULT)


@pytest.fixture
def admin(admin_user) -> Actor:
    return Actor(id=admin_user.id, email=admin_user.email, capability=PRIVILEGED)


@pytest.fixture
def tomorrow() -> date:
    return date.today() + timedelta(days=1)


@pytest.fixture
def booking(tomorrow) -> dict:
    return {
        "full_name": "Jane Doe",
        "service_type": "Men's Haircut",
        "appointment_date": tomorrow,
        "appointment_time": "10:00",
    }


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)
