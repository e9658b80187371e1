"""Exception hierarchy and HTTP error mapping for drivetree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DriveTreeError(Exception):
    """
    Base exception for drivetree.

    Attributes:
        details: Optional structured information (e.g., HTTP status, node id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidStateError(DriveTreeError):
    """Raised when the engine is used in an invalid state (e.g., not authorized)."""


class InvalidArgumentError(DriveTreeError):
    """Raised when arguments passed to the library are invalid."""


class InvalidTransitionError(DriveTreeError):
    """Raised when a TokenState event is not allowed from the current state."""


class DecodeError(DriveTreeError):
    """Raised when a listing envelope or item record has an unexpected shape."""


class TreeError(DriveTreeError):
    """Base class for structural FileTree failures."""


class UnknownParentError(TreeError):
    """Raised when inserting under a parent id that is not in the tree."""


class DuplicateIdError(TreeError):
    """Raised when inserting a node whose id is already in the tree."""


class UnknownNodeError(TreeError):
    """Raised when querying a node id that is not in the tree."""


class HttpError(DriveTreeError):
    """Raised when the remote store answers with a non-2xx status."""

    @property
    def status_code(self) -> int:
        value = self.details.get("status_code")
        return value if isinstance(value, int) else 0


class AuthError(HttpError):
    """Raised when credentials are rejected (HTTP 401) or OAuth calls fail."""


class BadRequestError(HttpError):
    """Raised when request arguments are rejected by the server (HTTP 400)."""


class PermissionError(HttpError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class NotFoundError(HttpError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class ConflictError(HttpError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(HttpError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(HttpError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class ApiError(HttpError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class NetworkError(HttpError):
    """Raised when network/timeout issues prevent the request."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to drivetree exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> HttpError:
    """
    Map an HTTP error to a drivetree exception.

    Policy:
        - 400 -> BadRequestError
        - 401 -> AuthError
        - 403 -> PermissionError (default), but QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return BadRequestError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
