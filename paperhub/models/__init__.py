"""SQLAlchemy models."""

from paperhub.models.otp_challenge import OtpChallenge
from paperhub.models.paper import Paper
from paperhub.models.user import User

__all__ = [
    "User",
    "Paper",
    "OtpChallenge",
]
