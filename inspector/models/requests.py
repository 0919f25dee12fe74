"""Pydantic request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Query parameters for the paginated listing (``?page=2&page_size=30``)."""

    page: int = Field(..., ge=0)
    page_size: int = Field(..., ge=0)
