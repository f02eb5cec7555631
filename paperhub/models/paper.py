"""Paper model: catalog entry for an uploaded document."""

import uuid

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from paperhub.database import Base
from paperhub.models.mixins import TimestampMixin


class Paper(Base, TimestampMixin):
    """Metadata for a stored document, bound to its uploader."""

    __tablename__ = "papers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject = Column(String(255), nullable=False, index=True)
    course_code = Column(String(64), nullable=False, index=True)
    exam_year = Column(String(16), nullable=False)
    exam_name = Column(String(255), nullable=False)
    category = Column(String(64), nullable=False)
    file_reference = Column(String(2048), nullable=False)
    uploader_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    uploader = relationship("User", backref="papers")
