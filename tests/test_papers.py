"""Paper catalog API tests."""

from unittest.mock import patch

from conftest import signup, upload
from sqlalchemy.exc import OperationalError

from paperhub.config import get_settings
from paperhub.exceptions import StorageFailure
from paperhub.models.paper import Paper
from paperhub.models.user import User


def test_upload_paper(client, auth_headers, blob_store):
    """Uploading stores the file and returns the enriched record."""
    response = upload(client, auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["subject"] == "Thermodynamics"
    assert data["courseCode"] == "ME201"
    assert data["examYear"] == "2023"
    assert data["examName"] == "Midterm"
    assert data["category"] == "Mid Sem"
    assert data["uploaderId"] == auth_headers.user_id
    assert data["uploader"]["firstName"] == "Test"
    assert data["uploader"]["level"] == "Silver"

    reference = data["fileReference"]
    assert reference.startswith("/files/")
    assert reference.endswith(".pdf")
    stored = blob_store.root / reference.rsplit("/", 1)[-1]
    assert stored.read_bytes() == b"%PDF-1.4 test"


def test_upload_awards_points(client, auth_headers):
    """Each accepted upload adds 50 points."""
    upload(client, auth_headers)
    upload(client, auth_headers, subject="Algorithms")

    profile = client.get("/api/auth/profile", headers=auth_headers).json()
    assert profile["points"] == 100
    assert profile["uploads"] == 2


def test_upload_requires_token(client):
    """Uploads need authentication."""
    response = upload(client, {})
    assert response.status_code == 401


def test_upload_missing_metadata(client, auth_headers):
    """Missing required fields are rejected before anything is stored."""
    response = client.post(
        "/api/papers/upload",
        headers=auth_headers,
        data={"subject": "Physics"},
        files={"file": ("p.pdf", b"data", "application/pdf")},
    )
    assert response.status_code == 422
    assert response.json()["kind"] == "validation_failure"


def test_upload_empty_file(client, auth_headers, db):
    """An empty file is not a paper."""
    response = client.post(
        "/api/papers/upload",
        headers=auth_headers,
        data={
            "subject": "Physics",
            "courseCode": "PH101",
            "examYear": "2022",
            "examName": "Final",
            "category": "End Sem",
        },
        files={"file": ("p.pdf", b"", "application/pdf")},
    )
    assert response.status_code == 422
    assert db.query(Paper).count() == 0


def test_blob_failure_aborts_upload(client, auth_headers, db, blob_store):
    """If the blob store rejects the write, nothing is indexed and no points are awarded."""
    with patch.object(blob_store, "put", side_effect=StorageFailure("Error uploading file")):
        response = upload(client, auth_headers)

    assert response.status_code == 503
    assert response.json()["kind"] == "storage_failure"
    assert db.query(Paper).count() == 0
    assert client.get("/api/auth/profile", headers=auth_headers).json()["points"] == 0


def test_metadata_failure_leaves_orphan_and_no_points(client, auth_headers, db, blob_store):
    """A failed row insert after a stored blob reports failure and awards nothing."""
    original_commit = db.commit
    calls = {"n": 0}

    def failing_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("INSERT INTO papers", {}, Exception("disk I/O error"))
        return original_commit()

    with patch.object(db, "commit", side_effect=failing_commit):
        response = upload(client, auth_headers)

    assert response.status_code == 503
    assert response.json()["kind"] == "storage_failure"
    assert db.query(Paper).count() == 0
    # The orphaned blob stays for out-of-band reconciliation
    assert len(list(blob_store.root.iterdir())) == 1

    user = db.query(User).filter(User.id == auth_headers.user_id).one()
    assert user.points == 0


def test_points_failure_after_index_reports_storage_failure(client, auth_headers, db):
    """A failed award after the row is saved is reported, and the paper stays indexed."""
    error = OperationalError("UPDATE users", {}, Exception("database is locked"))
    with patch("paperhub.services.catalog.award_points", side_effect=error):
        response = upload(client, auth_headers)

    assert response.status_code == 503
    assert response.json()["kind"] == "storage_failure"
    assert db.query(Paper).count() == 1
    assert client.get("/api/auth/profile", headers=auth_headers).json()["points"] == 0


def test_upload_over_size_limit(client, auth_headers, db, blob_store, monkeypatch):
    """Files larger than MAX_UPLOAD_BYTES are rejected before anything is stored."""
    monkeypatch.setattr(get_settings(), "max_upload_bytes", 8)

    response = upload(client, auth_headers)

    assert response.status_code == 422
    assert response.json()["kind"] == "validation_failure"
    assert db.query(Paper).count() == 0
    assert not blob_store.root.exists()


def test_upload_at_size_limit(client, auth_headers, monkeypatch):
    """A file exactly at the limit is accepted."""
    monkeypatch.setattr(get_settings(), "max_upload_bytes", len(b"%PDF-1.4 test"))
    assert upload(client, auth_headers).status_code == 201


def test_search_all(client, auth_headers):
    """An empty query returns every paper."""
    upload(client, auth_headers, subject="Thermodynamics")
    upload(client, auth_headers, subject="Algorithms", course_code="CS301")

    for params in ({}, {"query": ""}):
        response = client.get("/api/papers/search", params=params)
        assert response.status_code == 200
        assert {p["subject"] for p in response.json()} == {"Thermodynamics", "Algorithms"}


def test_search_substring_case_insensitive(client, auth_headers):
    """Matching is a case-insensitive substring on subject."""
    upload(client, auth_headers, subject="Thermodynamics")
    upload(client, auth_headers, subject="Algorithms", course_code="CS301")

    response = client.get("/api/papers/search", params={"query": "algo"})
    assert response.status_code == 200
    results = response.json()
    assert [p["subject"] for p in results] == ["Algorithms"]


def test_search_matches_course_code_and_exam_name(client, auth_headers):
    """Course code and exam name are searched as well, and matches are unioned."""
    upload(client, auth_headers, subject="Thermodynamics", course_code="ME201", exam_name="Midterm")
    upload(client, auth_headers, subject="Algorithms", course_code="CS301", exam_name="Weekly Quiz")
    upload(client, auth_headers, subject="Quiz Bowl Prep", course_code="GEN100", exam_name="Final")

    by_code = client.get("/api/papers/search", params={"query": "me20"}).json()
    assert [p["subject"] for p in by_code] == ["Thermodynamics"]

    by_union = client.get("/api/papers/search", params={"query": "QUIZ"}).json()
    assert {p["subject"] for p in by_union} == {"Algorithms", "Quiz Bowl Prep"}


def test_search_treats_wildcards_literally(client, auth_headers):
    """LIKE wildcards in the query do not match everything."""
    upload(client, auth_headers, subject="Thermodynamics")
    response = client.get("/api/papers/search", params={"query": "%"})
    assert response.json() == []


def test_search_enriches_uploader(client, auth_headers):
    """Results carry the uploader's name, picture and level."""
    client.put("/api/auth/profile", headers=auth_headers, json={"profilePic": "/files/me.png"})
    upload(client, auth_headers)

    paper = client.get("/api/papers/search").json()[0]
    assert paper["uploader"] == {
        "id": auth_headers.user_id,
        "firstName": "Test",
        "lastName": "User",
        "profilePic": "/files/me.png",
        "level": "Silver",
    }


def test_upload_then_search_round_trip(client, auth_headers):
    """An uploaded paper is found with identical metadata and a resolvable uploader."""
    created = upload(
        client, auth_headers, subject="Signals", course_code="EE250", exam_year="2021", category="Quiz"
    ).json()

    found = client.get("/api/papers/search", params={"query": ""}).json()
    assert len(found) == 1
    paper = found[0]
    for key in ("id", "subject", "courseCode", "examYear", "category", "fileReference"):
        assert paper[key] == created[key]
    assert paper["uploader"]["id"] == auth_headers.user_id


def test_end_to_end_signup_upload_profile(client):
    """Signup, one upload, and the profile shows 50 points at Silver."""
    headers = signup(client, email="a@x.com", secret="pw123456")
    assert upload(client, headers).status_code == 201

    profile = client.get("/api/auth/profile", headers=headers).json()
    assert profile["points"] == 50
    assert profile["level"] == "Silver"


def test_download_counts_for_caller(client, auth_headers):
    """Downloads count against whoever downloads, not the uploader."""
    paper = upload(client, auth_headers).json()
    reader = signup(client, email="reader@example.com")

    first = client.post(f"/api/papers/{paper['id']}/download", headers=reader)
    second = client.post(f"/api/papers/{paper['id']}/download", headers=reader)
    assert first.status_code == second.status_code == 200
    assert second.json() == {
        "paperId": paper["id"],
        "fileReference": paper["fileReference"],
        "downloads": 2,
    }

    assert client.get("/api/auth/profile", headers=reader).json()["downloads"] == 2
    assert client.get("/api/auth/profile", headers=auth_headers).json()["downloads"] == 0


def test_download_unknown_paper(client, auth_headers):
    """Downloading a paper that does not exist is not found."""
    response = client.post("/api/papers/does-not-exist/download", headers=auth_headers)
    assert response.status_code == 404


def test_download_requires_token(client, auth_headers):
    """Downloads need authentication."""
    paper = upload(client, auth_headers).json()
    response = client.post(f"/api/papers/{paper['id']}/download")
    assert response.status_code == 401
