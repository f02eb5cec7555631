"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from paperhub.api import auth, papers
from paperhub.config import get_settings
from paperhub.database import init_db
from paperhub.exceptions import PaperHubError, StorageFailure, Unauthorized, ValidationFailure

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting PaperHub API ({settings.environment})")
    # PostgreSQL schemas are managed by alembic
    if settings.database_url.startswith("sqlite"):
        init_db()
    yield


app = FastAPI(
    title="PaperHub API",
    description="Question paper sharing with contribution points and levels",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5000",
            "http://127.0.0.1:5500",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(PaperHubError)
async def paperhub_error_handler(request: Request, exc: PaperHubError) -> JSONResponse:
    """Render domain errors as {kind, detail}."""
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": settings.auth_header_name}
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "detail": exc.message},
        headers=headers,
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Render backing store failures as storage_failure without leaking driver details."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=StorageFailure.status_code,
        content={"kind": StorageFailure.kind, "detail": StorageFailure.default_message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors with the validation_failure kind."""
    return JSONResponse(
        status_code=ValidationFailure.status_code,
        content={
            "kind": ValidationFailure.kind,
            # Submitted values are dropped so secrets never echo back
            "detail": jsonable_encoder(
                [
                    {key: error[key] for key in ("loc", "msg", "type") if key in error}
                    for error in exc.errors()
                ]
            ),
        },
    )


# Register routers
app.include_router(auth.router)
app.include_router(papers.router)

# Locally stored papers are served read-only
if settings.storage_backend == "local" and settings.storage_public_url.startswith("/"):
    app.mount(
        settings.storage_public_url,
        StaticFiles(directory=settings.storage_dir, check_dir=False),
        name="files",
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
