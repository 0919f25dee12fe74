"""Public models for the inspector service."""

from inspector.models.requests import Pagination
from inspector.models.responses import ApiResponse, Item

__all__ = [
    "ApiResponse",
    "Item",
    "Pagination",
]
