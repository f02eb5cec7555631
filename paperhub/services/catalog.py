"""Catalog indexer: binds uploaded files to searchable paper metadata."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from paperhub.config import get_settings
from paperhub.exceptions import NotFound, StorageFailure, ValidationFailure
from paperhub.models.paper import Paper
from paperhub.schemas.paper import DownloadResponse, PaperMetadata, PaperView, UploaderView
from paperhub.services.ledger import award_points, increment_downloads
from paperhub.services.storage import BlobStore, generate_blob_name
from paperhub.services.users import get_user_by_id

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = (Paper.subject, Paper.course_code, Paper.exam_name)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def to_paper_view(paper: Paper) -> PaperView:
    """Project a paper row, with its uploader, onto the wire shape."""
    uploader = paper.uploader
    return PaperView(
        id=paper.id,
        subject=paper.subject,
        course_code=paper.course_code,
        exam_year=paper.exam_year,
        exam_name=paper.exam_name,
        category=paper.category,
        file_reference=paper.file_reference,
        uploader_id=paper.uploader_id,
        uploader=UploaderView.model_validate(uploader) if uploader is not None else None,
        created_at=paper.created_at,
    )


class CatalogService:
    """Uploads and searches papers."""

    def __init__(self, db: Session, blob_store: BlobStore):
        self.db = db
        self.blob_store = blob_store
        self.settings = get_settings()

    def upload(
        self,
        user_id: str,
        data: bytes,
        metadata: PaperMetadata,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> PaperView:
        """Store a file, index its metadata and reward the uploader.

        The blob write and the row insert are not one transaction. If the
        insert fails after the blob is stored, the blob is left orphaned for
        out-of-band reconciliation and the upload is reported as failed.
        Points are awarded only after both writes succeed. A failed award after
        the insert is logged and reported, leaving the paper indexed.
        """
        if not data:
            raise ValidationFailure("No file uploaded")
        if len(data) > self.settings.max_upload_bytes:
            raise ValidationFailure("File is too large")
        for field, value in metadata.model_dump().items():
            if not value or not value.strip():
                raise ValidationFailure(f"Missing required field: {field}")

        if get_user_by_id(self.db, user_id) is None:
            raise NotFound("User not found")

        reference = self.blob_store.put(generate_blob_name(filename), data, content_type)

        paper = Paper(
            subject=metadata.subject.strip(),
            course_code=metadata.course_code.strip(),
            exam_year=metadata.exam_year.strip(),
            exam_name=metadata.exam_name.strip(),
            category=metadata.category.strip(),
            file_reference=reference,
            uploader_id=user_id,
        )
        try:
            self.db.add(paper)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save paper metadata, orphaned blob {reference}: {e}")
            raise StorageFailure("Error saving paper metadata") from e

        paper_id = paper.id
        try:
            points, level = award_points(self.db, user_id, self.settings.upload_award_points)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Paper {paper_id} indexed but points not awarded to user {user_id}: {e}")
            raise StorageFailure("Paper saved but points could not be awarded") from e
        logger.info(f"User {user_id} uploaded paper {paper_id} ({points} points, {level.value})")

        return to_paper_view(self._get_paper(paper_id))

    def search(self, query: str | None = None) -> list[PaperView]:
        """All papers, or those whose subject, course code or exam name contain the query."""
        papers_query = self.db.query(Paper).options(joinedload(Paper.uploader))

        term = (query or "").strip()
        if term:
            pattern = f"%{escape_like(term)}%"
            papers_query = papers_query.filter(
                or_(*[column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS])
            )

        papers = papers_query.order_by(Paper.created_at.desc(), Paper.id).all()
        return [to_paper_view(paper) for paper in papers]

    def record_download(self, user_id: str, paper_id: str) -> DownloadResponse:
        """Count a download against the caller and return the file reference."""
        paper = self.db.query(Paper).filter(Paper.id == paper_id).first()
        if paper is None:
            raise NotFound("Paper not found")
        reference = paper.file_reference
        downloads = increment_downloads(self.db, user_id)
        return DownloadResponse(paper_id=paper_id, file_reference=reference, downloads=downloads)

    def _get_paper(self, paper_id: str) -> Paper:
        return (
            self.db.query(Paper)
            .options(joinedload(Paper.uploader))
            .filter(Paper.id == paper_id)
            .populate_existing()
            .one()
        )