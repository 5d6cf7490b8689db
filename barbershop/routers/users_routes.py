# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.auth import hash_password
from barbershop.db import get_session
from barbershop.deps import get_actor
from barbershop.models import User
from barbershop.roles import Actor
from barbershop.schemas import UserCreate, UserPublic

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(
    actor: Actor = Depends(get_actor),
    session: Session = Depends(get_session),
):
    user = session.get(User, actor.id)
    return {
        "id": actor.id,
        "email": actor.email,
        "full_name": user.full_name if user else None,
        "is_admin": actor.is_privileged,
    }


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    email = user.email.strip().lower()

    # 1) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) Create user (profile) in DB
    db_user = User(
        email=email,
        password_hash=hash_password(user.password),
        full_name=user.full_name,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    # 3) Return public user; new accounts never start as admin
    return {
        "id": db_user.id,
        "email": db_user.email,
        "full_name": db_user.full_name,
        "is_admin": False,
    }
