"""Authentication service: signup, login, profile and password reset."""

import logging

from sqlalchemy.orm import Session

from paperhub.exceptions import Conflict, InvalidCredentials, InvalidOtp, NotFound
from paperhub.models.user import User
from paperhub.schemas.auth import ProfileUpdate, SignupRequest, UserView
from paperhub.services.notifier import OtpNotifier
from paperhub.services.otp import OtpService
from paperhub.services.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from paperhub.services.users import (
    count_uploads,
    create_user,
    get_user_by_email,
    get_user_by_id,
    normalize_email,
    update_secret_hash,
)

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both login failures cost a bcrypt check
_DUMMY_HASH = get_password_hash("paperhub-timing-equalizer")

PROFILE_FIELDS = ("first_name", "last_name", "phone", "bio", "profile_pic")

# Fields an explicit null clears, mapped to their cleared value
CLEARABLE_FIELDS = {"bio": None, "profile_pic": ""}


def build_user_view(db: Session, user: User) -> UserView:
    """Project a user row onto its public representation."""
    view = UserView.model_validate(user)
    view.uploads = count_uploads(db, user.id)
    return view


class AuthService:
    """Orchestrates the credential store, hasher, token issuer and OTP manager."""

    def __init__(self, db: Session, notifier: OtpNotifier, otp_service: OtpService | None = None):
        self.db = db
        self.notifier = notifier
        self.otp_service = otp_service or OtpService(db)

    def signup(self, data: SignupRequest) -> str:
        """Create an account and return a session token."""
        # Fast path only; the unique index rejects concurrent duplicates
        if get_user_by_email(self.db, data.email):
            raise Conflict()

        user = create_user(
            self.db,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            secret_hash=get_password_hash(data.secret),
        )
        logger.info(f"Registered user {user.id}")
        return create_access_token(user.id)

    def login(self, email: str, secret: str) -> str:
        """Exchange credentials for a session token."""
        user = get_user_by_email(self.db, email)
        if user is None:
            verify_password(secret, _DUMMY_HASH)
            logger.warning("Failed login attempt for unknown account")
            raise InvalidCredentials()
        if not verify_password(secret, user.secret_hash):
            logger.warning(f"Failed login attempt for user {user.id}")
            raise InvalidCredentials()
        return create_access_token(user.id)

    def authenticate(self, token: str) -> User:
        """Resolve a session token to its user."""
        user_id = decode_access_token(token)
        user = get_user_by_id(self.db, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def get_profile(self, token: str) -> UserView:
        return build_user_view(self.db, self.authenticate(token))

    def update_profile(self, user: User, fields: ProfileUpdate) -> UserView:
        """Apply a partial update to display fields only."""
        changes = fields.model_dump(exclude_unset=True)
        for name in PROFILE_FIELDS:
            if name not in changes:
                continue
            if changes[name] is not None:
                setattr(user, name, changes[name])
            elif name in CLEARABLE_FIELDS:
                setattr(user, name, CLEARABLE_FIELDS[name])
        self.db.commit()
        self.db.refresh(user)
        return build_user_view(self.db, user)

    def request_password_reset(self, email: str) -> None:
        """Issue a reset code and hand it to the notifier.

        Runs the same steps whether or not the email is registered so the
        response reveals nothing about account existence.
        """
        email = normalize_email(email)
        code = self.otp_service.issue(email)
        self.notifier.send_reset_code(email, code)

    def verify_otp_and_reset(self, email: str, code: str, new_secret: str) -> None:
        """Set a new secret if the code is the newest usable one for the email."""
        challenge = self.otp_service.find_valid(email, code)
        if challenge is None:
            logger.warning(f"Rejected password reset code for {normalize_email(email)}")
            raise InvalidOtp()

        user = get_user_by_email(self.db, email)
        if user is None:
            raise NotFound("User not found")

        secret_hash = get_password_hash(new_secret)
        # The claim and the secret write commit together
        if not self.otp_service.claim(challenge):
            self.db.rollback()
            logger.warning(f"Password reset code for {user.email} was already used")
            raise InvalidOtp()
        update_secret_hash(self.db, user, secret_hash)
        self.otp_service.consume(email)
        self.db.commit()
        logger.info(f"Password reset for user {user.id}")
