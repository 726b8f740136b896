"""initial schema: users, projects, skills

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("profile_pic_link", sa.String(512), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "projects",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("tools", sa.JSON(), nullable=False),
        sa.Column("github_link", sa.String(512), nullable=True),
        sa.Column("deployed_url", sa.String(512), nullable=True),
        sa.Column("duration", sa.String(128), nullable=True),
        sa.Column("challenges", sa.Text(), nullable=True),
        sa.Column("cloudinary_video_url", sa.String(1024), nullable=True),
        sa.Column("cloudinary_video_public_id", sa.String(255), nullable=True),
        sa.Column("cloudinary_thumbnail_url", sa.String(1024), nullable=True),
        sa.Column("cloudinary_thumbnail_public_id", sa.String(255), nullable=True),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
    )
    op.create_index("idx_projects_created_at", "projects", [sa.text("created_at DESC")])

    op.create_table(
        "skills",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("topics", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("image_public_id", sa.String(255), nullable=False),
        sa.Column("created_at", TIMESTAMP, nullable=False),
        sa.Column("updated_at", TIMESTAMP, nullable=False),
    )
    op.create_index("idx_skills_created_at", "skills", [sa.text("created_at DESC")])


def downgrade() -> None:
    op.drop_index("idx_skills_created_at", table_name="skills")
    op.drop_table("skills")
    op.drop_index("idx_projects_created_at", table_name="projects")
    op.drop_table("projects")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
