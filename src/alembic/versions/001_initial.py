"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _string(length: int | None = None) -> sqlmodel.sql.sqltypes.AutoString:
    return sqlmodel.sql.sqltypes.AutoString(length=length)


def upgrade() -> None:
    # 1. Profiles
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", _string(255), nullable=False),
        sa.Column("username", _string(50), nullable=True),
        sa.Column("hashed_password", _string(255), nullable=True),
        sa.Column("role", _string(20), nullable=False, server_default="student"),
        sa.Column("name", _string(100), nullable=False),
        sa.Column("department", _string(100), nullable=True),
        sa.Column("phone", _string(30), nullable=True),
        sa.Column("year", _string(20), nullable=True),
        sa.Column("gpa", sa.Float(), nullable=True),
        sa.Column("auth_provider", _string(50), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('student', 'teacher', 'admin')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # 2. Refresh tokens
    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token_hash", _string(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])
    op.create_index("ix_refresh_tokens_token_hash", "refresh_tokens", ["token_hash"], unique=True)

    # 3. Postings
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", _string(200), nullable=False),
        sa.Column("description", _string(), nullable=False),
        sa.Column("requirements", sa.JSON(), nullable=False),
        sa.Column("duration", _string(100), nullable=False, server_default=""),
        sa.Column("location", _string(200), nullable=False, server_default=""),
        sa.Column("max_students", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", _string(20), nullable=False, server_default="draft"),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("author_email", _string(255), nullable=False),
        sa.Column("author_name", _string(100), nullable=False),
        sa.Column("department", _string(100), nullable=False, server_default="Unknown"),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("stipend", _string(100), nullable=True),
        sa.Column("outcome", _string(), nullable=True),
        sa.Column("document_url", _string(1000), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('draft', 'active', 'closed')", name="ck_projects_status"),
        sa.CheckConstraint("max_students >= 1", name="ck_projects_max_students"),
        sa.CheckConstraint("views >= 0", name="ck_projects_views"),
    )
    op.create_index("ix_projects_title", "projects", ["title"])
    op.create_index("ix_projects_status", "projects", ["status"])
    op.create_index("ix_projects_author_id", "projects", ["author_id"])
    op.create_index("ix_projects_author_email", "projects", ["author_email"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    # 4. Applications
    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("student_id", sa.Uuid(), nullable=False),
        sa.Column("student_email", _string(255), nullable=False),
        sa.Column("student_name", _string(100), nullable=False),
        sa.Column("student_phone", _string(30), nullable=False, server_default=""),
        sa.Column("student_year", _string(20), nullable=False, server_default=""),
        sa.Column("student_gpa", sa.Float(), nullable=False, server_default="0"),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("project_title", _string(200), nullable=False),
        sa.Column("teacher_id", sa.Uuid(), nullable=False),
        sa.Column("teacher_email", _string(255), nullable=False),
        sa.Column("cover_letter", _string(), nullable=False),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("resume_url", _string(1000), nullable=True),
        sa.Column("status", _string(20), nullable=False, server_default="pending"),
        sa.Column("applied_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", "project_id", name="uq_applications_student_project"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="ck_applications_status"
        ),
    )
    op.create_index("ix_applications_student_id", "applications", ["student_id"])
    op.create_index("ix_applications_project_id", "applications", ["project_id"])
    op.create_index("ix_applications_teacher_id", "applications", ["teacher_id"])
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_applied_at", "applications", ["applied_at"])

    # 5. Blog posts
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", _string(200), nullable=False),
        sa.Column("content", _string(), nullable=False),
        sa.Column("excerpt", _string(500), nullable=False, server_default=""),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("author_email", _string(255), nullable=False),
        sa.Column("author_name", _string(100), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_time", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("pdf_url", _string(1000), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blog_posts_author_id", "blog_posts", ["author_id"])
    op.create_index("ix_blog_posts_author_email", "blog_posts", ["author_email"])
    op.create_index("ix_blog_posts_published", "blog_posts", ["published"])
    op.create_index("ix_blog_posts_created_at", "blog_posts", ["created_at"])


def downgrade() -> None:
    op.drop_table("blog_posts")
    op.drop_table("applications")
    op.drop_table("projects")
    op.drop_table("refresh_tokens")
    op.drop_table("users")
