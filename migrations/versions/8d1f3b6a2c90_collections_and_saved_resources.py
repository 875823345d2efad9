"""collections, saved resources and comment edits

Revision ID: 8d1f3b6a2c90
Revises: 5c2a9e41d7b3
Create Date: 2026-10-19 15:40:02.118734

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8d1f3b6a2c90"
down_revision: Union[str, Sequence[str], None] = "5c2a9e41d7b3"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add collections, saved resources and comment edit timestamps."""
    op.create_table(
        "collection",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("cover_image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_collection_owner_id", "collection", ["owner_id"])

    op.create_table(
        "collection_resource",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("collection_id", sa.Integer(), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["collection_id"], ["collection.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "collection_id",
            "resource_id",
            name="uq_collection_resource_collection_resource",
        ),
    )
    op.create_index(
        "ix_collection_resource_collection_id", "collection_resource", ["collection_id"]
    )
    op.create_index("ix_collection_resource_resource_id", "collection_resource", ["resource_id"])

    op.create_table(
        "saved_resource",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user_profile.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["resource_id"], ["resource.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "resource_id", name="uq_saved_resource_user_resource"),
    )
    op.create_index("ix_saved_resource_user_id", "saved_resource", ["user_id"])
    op.create_index("ix_saved_resource_resource_id", "saved_resource", ["resource_id"])

    with op.batch_alter_table("resource_comment") as batch_op:
        batch_op.add_column(sa.Column("updated_at", sa.DateTime(), nullable=True))


def downgrade() -> None:
    """Drop collections, saved resources and comment edit timestamps."""
    with op.batch_alter_table("resource_comment") as batch_op:
        batch_op.drop_column("updated_at")

    op.drop_index("ix_saved_resource_resource_id", table_name="saved_resource")
    op.drop_index("ix_saved_resource_user_id", table_name="saved_resource")
    op.drop_table("saved_resource")
    op.drop_index("ix_collection_resource_resource_id", table_name="collection_resource")
    op.drop_index("ix_collection_resource_collection_id", table_name="collection_resource")
    op.drop_table("collection_resource")
    op.drop_index("ix_collection_owner_id", table_name="collection")
    op.drop_table("collection")
