"""Paper catalog schemas."""

from datetime import datetime

from paperhub.schemas.common import CamelModel


class PaperMetadata(CamelModel):
    """Descriptive fields supplied alongside an uploaded file."""

    subject: str
    course_code: str
    exam_year: str
    exam_name: str
    category: str


class UploaderView(CamelModel):
    """Uploader identity denormalized into paper responses."""

    id: str
    first_name: str
    last_name: str
    profile_pic: str = ""
    level: str


class PaperView(CamelModel):
    """A catalog entry with its uploader."""

    id: str
    subject: str
    course_code: str
    exam_year: str
    exam_name: str
    category: str
    file_reference: str
    uploader_id: str
    uploader: UploaderView | None = None
    created_at: datetime | None = None


class DownloadResponse(CamelModel):
    """Result of recording a download."""

    paper_id: str
    file_reference: str
    downloads: int
