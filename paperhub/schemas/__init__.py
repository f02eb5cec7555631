"""Pydantic schemas for API requests and responses."""

from paperhub.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    UserView,
    VerifyOtpRequest,
)
from paperhub.schemas.common import MessageResponse
from paperhub.schemas.paper import DownloadResponse, PaperMetadata, PaperView, UploaderView

__all__ = [
    "SignupRequest",
    "LoginRequest",
    "TokenResponse",
    "UserView",
    "ProfileUpdate",
    "ForgotPasswordRequest",
    "VerifyOtpRequest",
    "MessageResponse",
    "PaperMetadata",
    "PaperView",
    "UploaderView",
    "DownloadResponse",
]
