"""OTP challenge model for password recovery."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String

from paperhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class OtpChallenge(Base):
    """A one-time passcode issued for an email address.

    Rows are never deleted. A challenge stops being usable once it is
    consumed or falls outside the expiry window.
    """

    __tablename__ = "otp_challenges"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    # Set by the application so ordering has sub-second resolution
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    consumed_at = Column(DateTime(timezone=True), nullable=True)
