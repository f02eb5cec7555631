"""User model."""

import uuid

from sqlalchemy import CheckConstraint, Column, Integer, String, Text

from paperhub.database import Base
from paperhub.models.enums import Level
from paperhub.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, ownership and reputation."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        CheckConstraint("downloads >= 0", name="ck_users_downloads_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    # Always stored normalized (trimmed, lower-cased)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=False)
    secret_hash = Column(String(255), nullable=False)
    points = Column(Integer, nullable=False, default=0, server_default="0")
    level = Column(String(20), nullable=False, default=Level.SILVER.value, server_default="Silver")
    profile_pic = Column(String(1024), nullable=False, default="", server_default="")
    bio = Column(Text, nullable=True)
    downloads = Column(Integer, nullable=False, default=0, server_default="0")
