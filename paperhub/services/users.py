"""Credential store: CRUD over user identity records."""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from paperhub.exceptions import Conflict
from paperhub.models.enums import Level
from paperhub.models.paper import Paper
from paperhub.models.user import User


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups."""
    return email.strip().lower()


def get_user_by_id(db: Session, user_id: str) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email (case-insensitive)."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def create_user(
    db: Session,
    *,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    secret_hash: str,
) -> User:
    """Insert a new user at the lowest tier.

    The unique index on email is the real guarantee against duplicates; a
    concurrent insert that loses the race is reported as Conflict.
    """
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=normalize_email(email),
        phone=phone,
        secret_hash=secret_hash,
        points=0,
        level=Level.SILVER.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict() from None
    db.refresh(user)
    return user


def update_secret_hash(db: Session, user: User, secret_hash: str) -> None:
    """Replace a user's stored secret hash. The caller commits."""
    user.secret_hash = secret_hash
    db.flush()


def count_uploads(db: Session, user_id: str) -> int:
    """Number of papers a user has uploaded."""
    return db.query(func.count(Paper.id)).filter(Paper.uploader_id == user_id).scalar() or 0
