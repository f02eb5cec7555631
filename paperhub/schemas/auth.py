"""Authentication schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from paperhub.schemas.common import CamelModel

# bcrypt only looks at the first 72 bytes
SECRET_MAX_LENGTH = 72


class SignupRequest(CamelModel):
    """User registration request."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    secret: str = Field(..., min_length=8, max_length=SECRET_MAX_LENGTH)


class LoginRequest(CamelModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    secret: str = Field(..., min_length=1, max_length=SECRET_MAX_LENGTH)


class TokenResponse(CamelModel):
    """Session token response."""

    token: str


class UserView(CamelModel):
    """Public projection of a user. Never carries the secret hash."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    points: int
    level: str
    profile_pic: str = ""
    bio: str | None = None
    uploads: int = 0
    downloads: int = 0
    created_at: datetime | None = None


class ProfileUpdate(CamelModel):
    """Partial update of display fields."""

    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=32)
    bio: str | None = Field(None, max_length=2000)
    profile_pic: str | None = Field(None, max_length=1024)


class ForgotPasswordRequest(CamelModel):
    """Request a password reset code."""

    email: EmailStr = Field(..., max_length=255)


class VerifyOtpRequest(CamelModel):
    """Reset a password with a one-time code."""

    email: EmailStr = Field(..., max_length=255)
    code: str = Field(..., pattern=r"^\d{6}$")
    new_secret: str = Field(..., min_length=8, max_length=SECRET_MAX_LENGTH)
