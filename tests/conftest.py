"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paperhub.database import Base, get_db
from paperhub.main import app
from paperhub.services.notifier import get_notifier
from paperhub.services.storage import LocalBlobStore, get_blob_store


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, email and secret."""

    def __init__(
        self, *args, user_id: str | None = None, email: str = "", secret: str = "", **kwargs
    ):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.secret = secret


class RecordingNotifier:
    """Captures reset codes instead of publishing them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send_reset_code(self, email: str, code: str) -> None:
        self.sent.append((email, code))

    def last_code_for(self, email: str) -> str:
        return [code for sent_email, code in self.sent if sent_email == email][-1]


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/paperhub", "/paperhub_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from paperhub import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def notifier():
    """In-memory reset code notifier."""
    return RecordingNotifier()


@pytest.fixture
def blob_store(tmp_path):
    """Blob store writing into a per-test directory."""
    return LocalBlobStore(tmp_path / "blobs", "/files")


@pytest.fixture(scope="function")
def client(db, notifier, blob_store):
    """Create a test client with database and collaborator overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(
    client, email="test@example.com", secret="testpass123", first_name="Test", last_name="User"
):
    """Register a user through the API and return auth headers for it."""
    response = client.post(
        "/api/auth/signup",
        json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phone": "+15550100",
            "secret": secret,
        },
    )
    assert response.status_code == 201
    token = response.json()["token"]
    headers = {"x-auth-token": token}
    user_id = client.get("/api/auth/profile", headers=headers).json()["id"]
    return AuthHeaders(headers, user_id=user_id, email=email, secret=secret)


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup(client)


def upload(
    client, headers, subject="Thermodynamics", course_code="ME201", exam_name="Midterm", **extra
):
    """Upload a small paper through the API."""
    data = {
        "subject": subject,
        "courseCode": course_code,
        "examYear": extra.pop("exam_year", "2023"),
        "examName": exam_name,
        "category": extra.pop("category", "Mid Sem"),
    }
    files = {"file": (extra.pop("filename", "paper.pdf"), b"%PDF-1.4 test", "application/pdf")}
    return client.post("/api/papers/upload", headers=headers, data=data, files=files)
