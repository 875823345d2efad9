"""initial schema

Revision ID: 5c2a9e41d7b3
Revises:
Create Date: 2026-10-19 09:12:44.418203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c2a9e41d7b3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create every HubLib table."""
    op.create_table(
        "user_profile",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "role IN ('user', 'moderator', 'admin', 'super_admin')",
            name="ck_user_profile_role",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "user_group",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["user_profile.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "group_member",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('member', 'admin')", name="ck_group_member_role"),
        sa.ForeignKeyConstraint(["group_id"], ["user_group.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_member_group_user"),
    )
    op.create_index("ix_group_member_group_id", "group_member", ["group_id"])
    op.create_index("ix_group_member_user_id", "group_member", ["user_id"])

    op.create_table(
        "resource",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=True),
        sa.Column("resource_type", sa.String(length=32), nullable=False),
        sa.Column("visibility", sa.String(length=32), nullable=False),
        sa.Column("external_url", sa.Text(), nullable=True),
        sa.Column("github_url", sa.Text(), nullable=True),
        sa.Column("file_url", sa.Text(), nullable=True),
        sa.Column("language", sa.String(length=100), nullable=True),
        sa.Column("license", sa.String(length=100), nullable=True),
        sa.Column("views_count", sa.Integer(), nullable=False),
        sa.Column("downloads_count", sa.Integer(), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=False),
        sa.Column("ratings_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "resource_type IN ('file_upload', 'external_link', 'github_repo')",
            name="ck_resource_type",
        ),
        sa.CheckConstraint(
            "visibility IN ('public', 'private', 'shared_users', 'shared_groups')",
            name="ck_resource_visibility",
        ),
        sa.ForeignKeyConstraint(["owner_id"], ["user_profile.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_resource_owner_id", "resource", ["owner_id"])
    op.create_index("ix_resource_visibility", "resource", ["visibility"])
    op.create_index("ix_resource_category", "resource", ["category"])

    op.create_table(
        "resource_tag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("resource_id", "tag", name="uq_resource_tag_resource_tag"),
    )
    op.create_index("ix_resource_tag_tag", "resource_tag", ["tag"])

    op.create_table(
        "resource_share",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("shared_with_user_id", sa.Integer(), nullable=True),
        sa.Column("shared_with_group_id", sa.Integer(), nullable=True),
        sa.Column("permission", sa.String(length=16), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("permission IN ('read', 'write')", name="ck_resource_share_permission"),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["shared_with_user_id"], ["user_profile.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["shared_with_group_id"], ["user_group.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "resource_id", "shared_with_user_id", name="uq_resource_share_resource_user"
        ),
        sa.UniqueConstraint(
            "resource_id", "shared_with_group_id", name="uq_resource_share_resource_group"
        ),
    )
    op.create_index("ix_resource_share_resource_id", "resource_share", ["resource_id"])
    op.create_index("ix_resource_share_user_id", "resource_share", ["shared_with_user_id"])
    op.create_index("ix_resource_share_group_id", "resource_share", ["shared_with_group_id"])

    op.create_table(
        "resource_permission",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("group_id", sa.Integer(), nullable=True),
        sa.Column("permission", sa.String(length=100), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["group_id"], ["user_group.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_resource_permission_resource_id", "resource_permission", ["resource_id"])
    op.create_index("ix_resource_permission_user_id", "resource_permission", ["user_id"])
    op.create_index("ix_resource_permission_group_id", "resource_permission", ["group_id"])

    op.create_table(
        "resource_rating",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_resource_rating_range"),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("resource_id", "user_id", name="uq_resource_rating_resource_user"),
    )
    op.create_index("ix_resource_rating_resource_id", "resource_rating", ["resource_id"])

    op.create_table(
        "resource_comment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_resource_comment_resource_id", "resource_comment", ["resource_id"])

    op.create_table(
        "suggestion",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("suggested_by", sa.Integer(), nullable=True),
        sa.Column("votes_count", sa.Integer(), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("reviewed_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "type IN ('category', 'tag', 'resource_type', 'filter')",
            name="ck_suggestion_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_suggestion_status",
        ),
        sa.ForeignKeyConstraint(["suggested_by"], ["user_profile.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["user_profile.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "type", name="uq_suggestion_name_type"),
    )
    op.create_index("ix_suggestion_status", "suggestion", ["status"])
    op.create_index("ix_suggestion_votes_count", "suggestion", ["votes_count"])

    op.create_table(
        "suggestion_vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("suggestion_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_suggestion_vote_type"),
        sa.ForeignKeyConstraint(["suggestion_id"], ["suggestion.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "suggestion_id", "user_id", name="uq_suggestion_vote_suggestion_user"
        ),
    )
    op.create_index("ix_suggestion_vote_suggestion_id", "suggestion_vote", ["suggestion_id"])

    op.create_table(
        "admin_config",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("key"),
    )


def downgrade() -> None:
    """Drop every HubLib table."""
    op.drop_table("admin_config")
    op.drop_index("ix_suggestion_vote_suggestion_id", table_name="suggestion_vote")
    op.drop_table("suggestion_vote")
    op.drop_index("ix_suggestion_votes_count", table_name="suggestion")
    op.drop_index("ix_suggestion_status", table_name="suggestion")
    op.drop_table("suggestion")
    op.drop_index("ix_resource_comment_resource_id", table_name="resource_comment")
    op.drop_table("resource_comment")
    op.drop_index("ix_resource_rating_resource_id", table_name="resource_rating")
    op.drop_table("resource_rating")
    op.drop_index("ix_resource_permission_group_id", table_name="resource_permission")
    op.drop_index("ix_resource_permission_user_id", table_name="resource_permission")
    op.drop_index("ix_resource_permission_resource_id", table_name="resource_permission")
    op.drop_table("resource_permission")
    op.drop_index("ix_resource_share_group_id", table_name="resource_share")
    op.drop_index("ix_resource_share_user_id", table_name="resource_share")
    op.drop_index("ix_resource_share_resource_id", table_name="resource_share")
    op.drop_table("resource_share")
    op.drop_index("ix_resource_tag_tag", table_name="resource_tag")
    op.drop_table("resource_tag")
    op.drop_index("ix_resource_category", table_name="resource")
    op.drop_index("ix_resource_visibility", table_name="resource")
    op.drop_index("ix_resource_owner_id", table_name="resource")
    op.drop_table("resource")
    op.drop_index("ix_group_member_user_id", table_name="group_member")
    op.drop_index("ix_group_member_group_id", table_name="group_member")
    op.drop_table("group_member")
    op.drop_table("user_group")
    op.drop_table("user_profile")
