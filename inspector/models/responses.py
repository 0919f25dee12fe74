"""Generic API response envelope model.

Error responses are wrapped in this envelope for consistency:
{ status_code: int, success: bool, message: str, data: T | None }
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope; ``success`` is true iff ``status_code`` is 2xx."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    success: bool
    message: str
    data: T | None = None

    @model_validator(mode="after")
    def _success_matches_status(self) -> ApiResponse[T]:
        if self.success != (200 <= self.status_code < 300):
            raise ValueError(
                f"success={self.success} does not match status_code={self.status_code}"
            )
        return self

    @classmethod
    def failure(cls, status_code: int, message: str) -> ApiResponse[T]:
        return cls(status_code=status_code, success=False, message=message, data=None)


class Item(BaseModel):
    """One row of the paginated listing."""

    id: int
    name: str
