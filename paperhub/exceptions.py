"""Domain errors.

Every error carries a machine-checkable ``kind``, a human-readable message and
the HTTP status it maps to. Messages must never include secrets, hashes or
passcodes.
"""

from fastapi import status


class PaperHubError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Conflict(PaperHubError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "User already exists"


class InvalidCredentials(PaperHubError):
    """Bad login. The message is identical for unknown email and wrong secret."""

    kind = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Unauthorized(PaperHubError):
    kind = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token, authorization denied"


class InvalidToken(Unauthorized):
    kind = "invalid_token"
    default_message = "Token is not valid"


class InvalidOtp(PaperHubError):
    kind = "invalid_otp"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired code"


class NotFound(PaperHubError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StorageFailure(PaperHubError):
    kind = "storage_failure"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is unavailable"


class ValidationFailure(PaperHubError):
    kind = "validation_failure"
    status_code = 422
    default_message = "Invalid request"
