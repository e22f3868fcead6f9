"""Error taxonomy for Taskboard.

Errors coming back from Supabase (PostgREST or Auth) are classified by
substring matching on their message into a small set of application errors,
logged, and surfaced to the caller as a notification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

Severity = Literal["low", "medium", "high"]


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", severity: Severity = "medium") -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "severity": self.severity}


class NetworkError(AppError):
    """Raised when the backend cannot be reached."""

    def __init__(self, message: str = "Connection error") -> None:
        super().__init__(message, "NETWORK_ERROR", "high")


class AuthenticationError(AppError):
    """Raised for bad credentials, unconfirmed accounts and expired sessions."""

    def __init__(self, message: str = "Authentication error") -> None:
        super().__init__(message, "AUTH_ERROR", "high")


class DataValidationError(AppError):
    """Raised when submitted data is rejected."""

    def __init__(self, message: str = "Validation error") -> None:
        super().__init__(message, "VALIDATION_ERROR", "medium")


class PermissionDeniedError(AppError):
    """Raised when the user may not perform an action."""

    def __init__(self, message: str = "You do not have permission to perform this action") -> None:
        super().__init__(message, "PERMISSION_ERROR", "high")


class DatabaseError(AppError):
    """Raised when a table operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, "DATABASE_ERROR", "high")


class NotFoundError(AppError):
    """Raised when a task or comment does not exist or is not visible."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, "NOT_FOUND_ERROR", "low")


def _error_message(error: BaseException) -> str:
    # postgrest APIError and supabase auth errors carry a .message attribute
    message = getattr(error, "message", None)
    return message if isinstance(message, str) and message else str(error)


def classify_error(error: object) -> AppError:
    """Map an arbitrary error onto the application error taxonomy."""
    if isinstance(error, AppError):
        return error
    if not isinstance(error, Exception):
        return AppError("Unknown error", "UNKNOWN_ERROR", "medium")
    if isinstance(error, httpx.TransportError):
        return NetworkError()

    message = _error_message(error)
    if "Invalid login credentials" in message:
        return AuthenticationError("Invalid email or password")
    if "Email not confirmed" in message:
        return AuthenticationError("Please confirm your email before signing in")
    if "JWT" in message:
        return AuthenticationError("Your session has expired, please sign in again")
    if "permission denied" in message:
        return PermissionDeniedError()
    if "duplicate key" in message:
        return DataValidationError("An item with this data already exists")
    if "User already registered" in message:
        return DataValidationError("An account with this email already exists")
    if "Password should be at least" in message:
        return DataValidationError("Password should be at least 6 characters")
    if "network" in message or "fetch" in message:
        return NetworkError()
    return AppError(message, "UNKNOWN_ERROR", "medium")


def handle_error(error: object) -> AppError:
    """Classify an error and log it."""
    app_error = classify_error(error)
    logger.error(
        "Error handled: code=%s severity=%s message=%s original=%r",
        app_error.code,
        app_error.severity,
        app_error.message,
        error,
    )
    return app_error


def log_critical(error: AppError, context: dict[str, Any] | None = None) -> None:
    """Log an error that needs attention beyond the user notification."""
    logger.error(
        "CRITICAL ERROR: code=%s message=%s context=%s timestamp=%s",
        error.code,
        error.message,
        context or {},
        datetime.now(timezone.utc).isoformat(),
    )


@dataclass
class ErrorResult(Generic[T]):
    """Outcome of with_error_handling: exactly one of data/error is set."""

    data: T | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def with_error_handling(fn: Callable[[], T]) -> ErrorResult[T]:
    """Run fn, returning its result or the classified error instead of raising."""
    try:
        return ErrorResult(data=fn())
    except Exception as e:
        return ErrorResult(error=handle_error(e))


@contextmanager
def raising_app_errors() -> Iterator[None]:
    """Re-raise any non-application error as a classified AppError."""
    try:
        yield
    except AppError:
        raise
    except Exception as e:
        raise handle_error(e) from e
