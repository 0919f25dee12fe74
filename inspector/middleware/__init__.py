"""Middleware package: error taxonomy, body capture and inspection."""

from inspector.middleware.body_capture import (
    CapturedBody,
    capture,
    capture_request,
    request_body_chunks,
)
from inspector.middleware.error_handler import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    BodyCaptureError,
    DatabaseError,
    ErrorKind,
    GenericError,
    InvalidInputError,
    NetworkError,
    error_response,
    register_error_handlers,
)
from inspector.middleware.inspection import InspectionMiddleware

__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "BodyCaptureError",
    "CapturedBody",
    "DatabaseError",
    "ErrorKind",
    "GenericError",
    "InspectionMiddleware",
    "InvalidInputError",
    "NetworkError",
    "capture",
    "capture_request",
    "error_response",
    "register_error_handlers",
    "request_body_chunks",
]
