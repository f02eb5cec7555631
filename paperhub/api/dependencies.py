"""FastAPI dependencies for authentication, database and collaborators."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from paperhub.config import get_settings
from paperhub.database import get_db
from paperhub.exceptions import Unauthorized
from paperhub.models.user import User
from paperhub.services.auth import AuthService
from paperhub.services.catalog import CatalogService
from paperhub.services.notifier import OtpNotifier, get_notifier
from paperhub.services.storage import BlobStore, get_blob_store

settings = get_settings()

# The session token travels in a custom header rather than Authorization
token_header = APIKeyHeader(name=settings.auth_header_name, auto_error=False)


def get_token(token: Annotated[str | None, Depends(token_header)]) -> str:
    """Extract the session token, failing if the header is absent."""
    if not token:
        raise Unauthorized()
    return token


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[OtpNotifier, Depends(get_notifier)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, notifier)


def get_catalog_service(
    db: Annotated[Session, Depends(get_db)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> CatalogService:
    """Get catalog service with dependencies."""
    return CatalogService(db, blob_store)


def get_current_user(
    token: Annotated[str, Depends(get_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Get the current authenticated user from the session token."""
    return auth_service.authenticate(token)
