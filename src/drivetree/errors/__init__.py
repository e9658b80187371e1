"""Public error exports for drivetree."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    BadRequestError,
    ConflictError,
    DecodeError,
    DriveTreeError,
    DuplicateIdError,
    HttpError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    InvalidTransitionError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    TreeError,
    UnknownNodeError,
    UnknownParentError,
    map_http_error,
)

__all__ = [
    "DriveTreeError",
    "InvalidStateError",
    "InvalidArgumentError",
    "InvalidTransitionError",
    "DecodeError",
    "TreeError",
    "UnknownParentError",
    "DuplicateIdError",
    "UnknownNodeError",
    "HttpError",
    "AuthError",
    "BadRequestError",
    "PermissionError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "ApiError",
    "NetworkError",
    "HttpErrorInfo",
    "map_http_error",
]
