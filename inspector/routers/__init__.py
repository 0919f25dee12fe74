"""HTTP routers."""

from inspector.routers.pages import create_pages_router

__all__ = ["create_pages_router"]
