"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class PageMeta(BaseModel):
    """Offset pagination metadata returned by list endpoints."""

    page: int = Field(..., ge=1, description="1-based page number")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Rows matching the filters")
    pages: int = Field(..., ge=0, description="Number of pages at this limit")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> PageMeta:
        """Derive the page count from ``total`` and ``limit``."""
        return cls(page=page, limit=limit, total=total, pages=(total + limit - 1) // limit)


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
