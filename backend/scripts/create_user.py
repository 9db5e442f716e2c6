#!/usr/bin/env python3
"""Create (or update) a user and print an access token for it."""

import argparse
import logging
import sys
from pathlib import Path

# Make the backend package importable when run as a script
BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from sqlmodel import Session, select  # noqa: E402

from app.core.security import create_access_token  # noqa: E402
from app.db import engine, init_db  # noqa: E402
from app.models import ROLE_EVENT_MANAGER, ROLE_VOLUNTEER, User  # noqa: E402

logger = logging.getLogger("create_user")


def create_user(email: str, name: str, role: str, bio: str | None = None) -> User:
    init_db()
    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == email.lower())).first()
        if user:
            logger.info(f"User {email} exists, updating")
            user.name = name
            user.role = role
            if bio is not None:
                user.bio = bio
        else:
            user = User(email=email.lower(), name=name, role=role, bio=bio)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("name")
    parser.add_argument(
        "--role",
        choices=[ROLE_VOLUNTEER, ROLE_EVENT_MANAGER],
        default=ROLE_VOLUNTEER,
    )
    parser.add_argument("--bio", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    user = create_user(args.email, args.name, args.role, args.bio)
    print(f"ID:    {user.id}")
    print(f"Email: {user.email}")
    print(f"Role:  {user.role}")
    print(f"Token: {create_access_token(user.id)}")


if __name__ == "__main__":
    main()
