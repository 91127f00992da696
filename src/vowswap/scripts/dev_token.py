"""Mint a bearer token for a local account, creating the account if needed.

Production tokens come from the identity provider; this script exists so a
developer can exercise the API against a local database.
"""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vowswap.core.security import Role, create_access_token
from vowswap.db.session import SessionLocal, create_tables
from vowswap.models import User


def ensure_user(db: Session, email: str, role: Role, name: str | None = None) -> User:
    """Return the account for ``email``, creating it or updating its role."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name=name, role=role)
        db.add(user)
    else:
        user.role = role
        if name:
            user.name = name
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Issue a development bearer token")
    parser.add_argument("email", help="Account email")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.CUSTOMER.value,
        help="Role claim for the account (default: CUSTOMER)",
    )
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before issuing the token.",
    )
    args = parser.parse_args(argv)

    try:
        if args.create_tables:
            create_tables()
        with SessionLocal() as db:
            user = ensure_user(db, args.email, Role(args.role), args.name)
            token = create_access_token(user.id)
    except SQLAlchemyError as exc:
        print(f"[dev_token] ERROR: {exc}", file=sys.stderr)
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
