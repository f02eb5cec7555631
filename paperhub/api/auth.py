"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from paperhub.api.dependencies import get_auth_service, get_current_user, get_token
from paperhub.models.user import User
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
from paperhub.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If the account exists, a reset code has been sent"


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(
    user_data: SignupRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    return TokenResponse(token=auth_service.signup(user_data))


@router.post("/login", response_model=TokenResponse)
def login(
    credentials: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and secret."""
    return TokenResponse(token=auth_service.login(credentials.email, credentials.secret))


@router.get("/profile", response_model=UserView)
def get_profile(
    token: Annotated[str, Depends(get_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    return auth_service.get_profile(token)


@router.put("/profile", response_model=UserView)
def update_profile(
    fields: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update display fields of the current user."""
    return auth_service.update_profile(current_user, fields)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    request: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Send a password reset code. The response never reveals whether the account exists."""
    auth_service.request_password_reset(request.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(
    request: VerifyOtpRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Reset the password using a one-time code."""
    auth_service.verify_otp_and_reset(request.email, request.code, request.new_secret)
    return MessageResponse(message="Password has been reset")
