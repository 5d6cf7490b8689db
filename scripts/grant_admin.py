"""Grant or revoke the admin role for an existing account."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlmodel import Session, select

# Ensure the project root is on sys.path so ``barbershop`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from barbershop.data import ADMIN_ROLE
from barbershop.db import create_db_and_tables, engine
from barbershop.models import User, UserRole


def set_admin(email: str, revoke: bool = False) -> int:
    create_db_and_tables()

    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == email.strip().lower())).first()
        if user is None:
            print(f"Error: no account registered for {email}")
            return 1

        grant = session.exec(
            select(UserRole).where(UserRole.user_id == user.id).where(UserRole.role == ADMIN_ROLE)
        ).first()

        if revoke:
            if grant is None:
                print(f"{email} is not an admin")
                return 0
            session.delete(grant)
            session.commit()
            print(f"Revoked admin role from {email}")
            return 0

        if grant is not None:
            print(f"{email} is already an admin")
            return 0

        session.add(UserRole(user_id=user.id, role=ADMIN_ROLE))
        session.commit()
        print(f"Granted admin role to {email}")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="Email of the account")
    parser.add_argument("--revoke", action="store_true", help="Remove the admin role instead")
    args = parser.parse_args()
    return set_admin(args.email, revoke=args.revoke)


if __name__ == "__main__":
    raise SystemExit(main())
