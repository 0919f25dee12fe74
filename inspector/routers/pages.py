"""Greeting and paginated listing endpoints.

- GET /      plain-text greeting
- GET /page  ``page_size`` generated items for ``?page=&page_size=``
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from inspector.models.requests import Pagination
from inspector.models.responses import Item

logger = logging.getLogger(__name__)


def create_pages_router() -> APIRouter:
    """Factory that creates the router for the demo endpoints."""

    pages_router = APIRouter(tags=["pages"])

    @pages_router.get("/", response_class=PlainTextResponse)
    async def hello() -> str:
        return "Hello, World!"

    @pages_router.get("/page")
    async def list_things(pagination: Annotated[Pagination, Query()]) -> list[Item]:
        """Return items ``1..=page_size``; ``page`` is logged but not applied."""
        logger.info("page: %d, page_size: %d", pagination.page, pagination.page_size)
        return [
            Item(id=i, name=f"Item {i}") for i in range(1, pagination.page_size + 1)
        ]

    return pages_router
