"""Paper catalog API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from paperhub.api.dependencies import get_catalog_service, get_current_user
from paperhub.models.user import User
from paperhub.schemas.paper import DownloadResponse, PaperMetadata, PaperView
from paperhub.services.catalog import CatalogService

router = APIRouter(prefix="/api/papers", tags=["papers"])


@router.post("/upload", response_model=PaperView, status_code=status.HTTP_201_CREATED)
def upload_paper(
    current_user: Annotated[User, Depends(get_current_user)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    file: Annotated[UploadFile, File()],
    subject: Annotated[str, Form(min_length=1, max_length=255)],
    course_code: Annotated[str, Form(alias="courseCode", min_length=1, max_length=64)],
    exam_year: Annotated[str, Form(alias="examYear", min_length=1, max_length=16)],
    exam_name: Annotated[str, Form(alias="examName", min_length=1, max_length=255)],
    category: Annotated[str, Form(min_length=1, max_length=64)],
):
    """Upload a paper file with its metadata and earn points."""
    metadata = PaperMetadata(
        subject=subject,
        course_code=course_code,
        exam_year=exam_year,
        exam_name=exam_name,
        category=category,
    )
    # One byte past the limit is enough to reject an oversized upload
    data = file.file.read(catalog.settings.max_upload_bytes + 1)
    return catalog.upload(
        current_user.id,
        data,
        metadata,
        filename=file.filename,
        content_type=file.content_type,
    )


@router.get("/search", response_model=list[PaperView])
def search_papers(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    query: str | None = None,
):
    """Search papers by subject, course code or exam name. Empty query lists everything."""
    return catalog.search(query)


@router.post("/{paper_id}/download", response_model=DownloadResponse)
def download_paper(
    paper_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Record a download by the current user and return the file reference."""
    return catalog.record_download(current_user.id, paper_id)
