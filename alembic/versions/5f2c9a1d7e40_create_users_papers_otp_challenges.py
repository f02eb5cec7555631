"""create users, papers and otp_challenges

Revision ID: 5f2c9a1d7e40
Revises:
Create Date: 2026-10-19 09:12:04.518220

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5f2c9a1d7e40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("secret_hash", sa.String(length=255), nullable=False),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("level", sa.String(length=20), server_default="Silver", nullable=False),
        sa.Column("profile_pic", sa.String(length=1024), server_default="", nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("downloads", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        sa.CheckConstraint("downloads >= 0", name="ck_users_downloads_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Unique index is the guarantee against duplicate signups
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "papers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("course_code", sa.String(length=64), nullable=False),
        sa.Column("exam_year", sa.String(length=16), nullable=False),
        sa.Column("exam_name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("file_reference", sa.String(length=2048), nullable=False),
        sa.Column("uploader_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["uploader_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_papers_subject"), "papers", ["subject"], unique=False)
    op.create_index(op.f("ix_papers_course_code"), "papers", ["course_code"], unique=False)
    op.create_index(op.f("ix_papers_uploader_id"), "papers", ["uploader_id"], unique=False)

    op.create_table(
        "otp_challenges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=6), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("consumed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_otp_challenges_id"), "otp_challenges", ["id"], unique=False)
    op.create_index(op.f("ix_otp_challenges_email"), "otp_challenges", ["email"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_otp_challenges_email"), table_name="otp_challenges")
    op.drop_index(op.f("ix_otp_challenges_id"), table_name="otp_challenges")
    op.drop_table("otp_challenges")
    op.drop_index(op.f("ix_papers_uploader_id"), table_name="papers")
    op.drop_index(op.f("ix_papers_course_code"), table_name="papers")
    op.drop_index(op.f("ix_papers_subject"), table_name="papers")
    op.drop_table("papers")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
