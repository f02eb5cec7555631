"""One-time passcode challenges for password recovery."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from paperhub.config import get_settings
from paperhub.models.otp_challenge import OtpChallenge
from paperhub.services.users import normalize_email

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_code() -> str:
    """Uniformly random 6-digit decimal code, leading zeros preserved."""
    return f"{secrets.randbelow(10**OTP_LENGTH):0{OTP_LENGTH}d}"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class OtpService:
    """Issues, validates and consumes password reset challenges.

    Policy: a challenge is usable only while unconsumed and younger than
    ``otp_expiration_minutes``. When several challenges carry the same code,
    the newest one decides. A successful reset consumes every outstanding
    challenge for the email, so a captured code cannot be replayed.
    """

    def __init__(self, db: Session, expiration: timedelta | None = None):
        self.db = db
        if expiration is None:
            expiration = timedelta(minutes=get_settings().otp_expiration_minutes)
        self.expiration = expiration

    def issue(self, email: str) -> str:
        """Persist a new challenge for an email and return its code."""
        code = generate_code()
        challenge = OtpChallenge(email=normalize_email(email), code=code)
        self.db.add(challenge)
        self.db.commit()
        logger.info(f"Issued password reset challenge for {challenge.email}")
        return code

    def find_valid(self, email: str, code: str) -> OtpChallenge | None:
        """Newest challenge matching (email, code), if it is still usable."""
        challenge = (
            self.db.query(OtpChallenge)
            .filter(
                OtpChallenge.email == normalize_email(email),
                OtpChallenge.code == code,
            )
            .order_by(OtpChallenge.created_at.desc(), OtpChallenge.id.desc())
            .first()
        )
        if challenge is None or challenge.consumed_at is not None:
            return None
        if _as_utc(challenge.created_at) + self.expiration <= datetime.now(UTC):
            return None
        return challenge

    def verify(self, email: str, code: str) -> bool:
        """Check a code without consuming it."""
        return self.find_valid(email, code) is not None

    def consume(self, email: str) -> int:
        """Mark all outstanding challenges for an email consumed. The caller commits."""
        return (
            self.db.query(OtpChallenge)
            .filter(
                OtpChallenge.email == normalize_email(email),
                OtpChallenge.consumed_at.is_(None),
            )
            .update({OtpChallenge.consumed_at: datetime.now(UTC)}, synchronize_session=False)
        )

    def claim(self, challenge: OtpChallenge) -> bool:
        """Atomically mark one challenge consumed. The caller commits.

        Only one of several concurrent claims on the same challenge sees the
        row still unconsumed; the others get False.
        """
        result = self.db.execute(
            update(OtpChallenge)
            .where(OtpChallenge.id == challenge.id, OtpChallenge.consumed_at.is_(None))
            .values(consumed_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
