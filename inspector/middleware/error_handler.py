"""Global error taxonomy and FastAPI exception handlers.

Application errors form a closed set: every ``AppError`` subclass is bound to
one ``ErrorKind`` and every kind carries its HTTP status code, so the
error-to-status mapping is fixed when the module is imported. The handlers
below turn these errors (plus request validation failures, routing errors
and unhandled exceptions) into a consistent JSON envelope:
{ status_code, success, message, data }.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import ClassVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inspector.models.responses import ApiResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class ErrorKind(Enum):
    """Closed set of application error kinds with their HTTP status."""

    GENERIC = (500, "An error occurred")
    INVALID_INPUT = (400, "Invalid input")
    DATABASE_ERROR = (500, "Database error")
    NETWORK_ERROR = (503, "Network error")
    AUTHENTICATION_ERROR = (401, "Authentication failed")
    AUTHORIZATION_ERROR = (403, "Authorization failed")

    def __init__(self, status_code: int, prefix: str) -> None:
        self.status_code = status_code
        self.prefix = prefix


class AppError(Exception):
    """Base error for all application errors.

    Not raised directly; subclasses bind a ``kind`` and a default ``detail``.
    """

    kind: ClassVar[ErrorKind]
    detail: str = "unspecified"

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if not isinstance(getattr(cls, "kind", None), ErrorKind):
            raise TypeError(f"{cls.__name__} must bind an ErrorKind")

    def __init__(self, detail: str | None = None) -> None:
        if not isinstance(getattr(self, "kind", None), ErrorKind):
            raise TypeError("AppError is abstract; raise one of its subclasses")
        self.detail = detail or self.__class__.detail
        self.message = f"{self.kind.prefix}: {self.detail}"
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class GenericError(AppError):
    kind = ErrorKind.GENERIC
    detail = "internal server error"


class InvalidInputError(AppError):
    kind = ErrorKind.INVALID_INPUT
    detail = "malformed request"


class DatabaseError(AppError):
    kind = ErrorKind.DATABASE_ERROR
    detail = "storage unavailable"


class NetworkError(AppError):
    kind = ErrorKind.NETWORK_ERROR
    detail = "upstream unreachable"


class AuthenticationError(AppError):
    kind = ErrorKind.AUTHENTICATION_ERROR
    detail = "missing or invalid credentials"


class AuthorizationError(AppError):
    kind = ErrorKind.AUTHORIZATION_ERROR
    detail = "access denied"


class BodyCaptureError(Exception):
    """A message body could not be drained.

    On the request path this is the client's fault (400). On the response
    path the handler already produced a result and failed while streaming it,
    which is a server defect (500).
    """

    def __init__(self, direction: str, cause: BaseException) -> None:
        self.direction = direction
        self.cause = cause
        self.message = f"failed to read {direction} body: {cause}"
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return 400 if self.direction == "request" else 500


# ---------------------------------------------------------------------------
# Responder
# ---------------------------------------------------------------------------


def _envelope(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON envelope error response."""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse[None].failure(status_code, message).model_dump(),
        headers=headers,
    )


def error_response(exc: AppError) -> JSONResponse:
    """Map an application error to its status code and envelope."""
    return _envelope(exc.status_code, exc.message)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc)


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Query/body deserialization failures are bad client input (400)."""
    reasons = "; ".join(
        f"{' -> '.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return _envelope(400, f"{ErrorKind.INVALID_INPUT.prefix}: {reasons}")


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors (404, 405, ...) keep their status but use the envelope."""
    return _envelope(exc.status_code, str(exc.detail), headers=exc.headers)


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions; logs the traceback and returns a generic 500."""
    logger.error("Unhandled exception: %s", exc, exc_info=exc)
    return error_response(GenericError())


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
