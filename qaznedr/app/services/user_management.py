"""User accounts: registration and credential checks.

This module does NOT call db.commit(); the caller (endpoint) is
responsible for committing.
"""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from qaznedr.app.core.security import get_password_hash, verify_password
from qaznedr.app.models.user import RoleEnum, User

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def register_user(
    db: Session,
    *,
    email: str,
    password: str,
    name: str | None = None,
) -> User:
    """Create a new account. Raises ValueError if the email is taken."""
    if get_user_by_email(db, email):
        raise ValueError("User already exists")

    user = User(
        email=email.lower(),
        name=name,
        hashed_password=get_password_hash(password),
        role=RoleEnum.BUYER,
    )
    db.add(user)
    db.flush()
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User | None:
    """Return the user when *password* matches, else None."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
