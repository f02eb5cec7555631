"""Blob storage for uploaded paper files."""

import logging
import re
import uuid
from pathlib import Path
from typing import Protocol

import httpx

from paperhub.config import get_settings
from paperhub.exceptions import StorageFailure

logger = logging.getLogger(__name__)

_SUFFIX_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def generate_blob_name(filename: str | None) -> str:
    """Collision-resistant object name that keeps the original extension."""
    suffix = Path(filename or "").suffix.lower()
    if not _SUFFIX_RE.match(suffix):
        suffix = ""
    return f"{uuid.uuid4().hex}{suffix}"


class BlobStore(Protocol):
    """Object store collaborator: persists bytes, returns a retrievable reference."""

    def put(self, name: str, data: bytes, content_type: str | None = None) -> str: ...


class LocalBlobStore:
    """Stores blobs on the local filesystem, served read-only under a public URL prefix."""

    def __init__(self, root: str | Path, public_url: str) -> None:
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def put(self, name: str, data: bytes, content_type: str | None = None) -> str:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / name).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write blob {name}: {e}")
            raise StorageFailure("Error uploading file") from e
        return f"{self.public_url}/{name}"


class HttpBlobStore:
    """Supabase-style storage REST API with public bucket URLs."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        bucket: str,
        timeout: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = timeout
        self.transport = transport

    def _headers(self, content_type: str | None) -> dict[str, str]:
        headers = {
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "false",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def public_url(self, name: str) -> str:
        return f"{self.api_url}/storage/v1/object/public/{self.bucket}/{name}"

    def put(self, name: str, data: bytes, content_type: str | None = None) -> str:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    f"{self.api_url}/storage/v1/object/{self.bucket}/{name}",
                    content=data,
                    headers=self._headers(content_type),
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"HTTP error uploading blob {name}: {e}")
            raise StorageFailure("Error uploading file") from e
        return self.public_url(name)


def get_blob_store() -> BlobStore:
    """Get the configured blob store."""
    settings = get_settings()
    if settings.storage_backend == "http":
        return HttpBlobStore(
            api_url=settings.storage_api_url or "",
            api_key=settings.storage_api_key,
            bucket=settings.storage_bucket,
            timeout=settings.outbound_timeout_seconds,
        )
    return LocalBlobStore(settings.storage_dir, settings.storage_public_url)
