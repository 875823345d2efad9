"""Curated, ordered collections of resources."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .resource import Resource


class Collection(Base):
    """A user's named list of resources.

    Public collections are visible to everyone; private ones only to their
    owner. Listing a resource in a collection never widens who may read it.
    """

    __tablename__ = "collection"
    __table_args__ = (Index("ix_collection_owner_id", "owner_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    items: Mapped[list[CollectionResource]] = relationship(
        "CollectionResource",
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CollectionResource.order_index",
    )


class CollectionResource(Base):
    """Membership of a resource in a collection, with its position."""

    __tablename__ = "collection_resource"
    __table_args__ = (
        UniqueConstraint(
            "collection_id",
            "resource_id",
            name="uq_collection_resource_collection_resource",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collection.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    collection: Mapped[Collection] = relationship("Collection", back_populates="items")
    resource: Mapped[Resource] = relationship("Resource")
