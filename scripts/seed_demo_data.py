#!/usr/bin/env python3
"""Seed demo data for local development.

Creates a dedicated demo user and uploads a handful of papers through the
catalog service, so points and levels are awarded the same way as in the API.

Usage:
    DATABASE_URL=sqlite:///./paperhub.db python scripts/seed_demo_data.py
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paperhub.config import get_settings
from paperhub.database import Base
from paperhub.models import OtpChallenge, Paper, User
from paperhub.schemas.paper import PaperMetadata
from paperhub.services.catalog import CatalogService
from paperhub.services.security import get_password_hash
from paperhub.services.storage import LocalBlobStore
from paperhub.services.users import create_user

settings = get_settings()
DATABASE_URL = os.getenv("DATABASE_URL", settings.database_url)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demopass123"

DEMO_PAPERS = [
    ("Thermodynamics", "ME201", "2023", "Mid Semester", "Mid Sem"),
    ("Algorithms", "CS301", "2022", "End Semester", "End Sem"),
    ("Signals and Systems", "EE250", "2023", "Quiz 2", "Quiz"),
    ("Engineering Mathematics", "MA101", "2021", "End Semester", "End Sem"),
]


def seed_demo_data():
    """Seed the database with a demo user and papers."""
    connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
    engine = create_engine(DATABASE_URL, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        existing_user = session.query(User).filter_by(email=DEMO_EMAIL).first()
        if existing_user:
            print("Demo data already exists. Clearing and re-seeding...")
            session.query(Paper).filter_by(uploader_id=existing_user.id).delete()
            session.query(OtpChallenge).filter_by(email=DEMO_EMAIL).delete()
            session.delete(existing_user)
            session.commit()

        print("Creating demo user...")
        user = create_user(
            session,
            first_name="Demo",
            last_name="User",
            email=DEMO_EMAIL,
            phone="+15550100",
            secret_hash=get_password_hash(DEMO_PASSWORD),
        )

        print("Uploading demo papers...")
        blob_store = LocalBlobStore(settings.storage_dir, settings.storage_public_url)
        catalog = CatalogService(session, blob_store)
        for subject, course_code, exam_year, exam_name, category in DEMO_PAPERS:
            catalog.upload(
                user.id,
                f"%PDF-1.4\n% {subject} {exam_year}\n".encode(),
                PaperMetadata(
                    subject=subject,
                    course_code=course_code,
                    exam_year=exam_year,
                    exam_name=exam_name,
                    category=category,
                ),
                filename=f"{course_code.lower()}-{exam_year}.pdf",
                content_type="application/pdf",
            )

        session.refresh(user)
        print(f"Demo data seeded successfully! {user.email}: {user.points} points ({user.level})")

    except Exception as e:
        session.rollback()
        print(f"Error seeding demo data: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_data()
