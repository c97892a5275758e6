"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable by the caller; internal errors (500) are not
    - to_response() returns the plain-text body sent to the caller
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with RegistryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Plain-text bodies: the message strings are the external contract
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cin: str | None = None
    release_date: date | None = None
    debug_info: dict[str, Any] | None = None


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> str:
        """Body returned to the caller."""
        return self.message

    def log_extra(self) -> dict:
        """Structured fields for the JSON log formatter."""
        extra: dict[str, Any] = {
            "error_code": self.code,
            "category": self.category.value,
        }
        if self.context.cin is not None:
            extra["cin"] = self.context.cin
        if self.context.release_date is not None:
            extra["release_date"] = self.context.release_date.isoformat()
        if self.context.debug_info:
            extra["debug_info"] = self.context.debug_info
        return extra


# ─── Domain Errors (400-level) ──────────────────────────────────

class UserValidationError(RegistryError):
    """Client-supplied user data violates a field rule."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class UserConflictError(RegistryError):
    """A user with the same CIN already exists."""
    def __init__(self, cin: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.cin = cin
        super().__init__(
            f"User with CIN {cin} already exists.",
            "USER_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.cin = cin


class UserNotFoundError(RegistryError):
    """No user matches the requested key."""
    def __init__(
        self,
        cin: str,
        release_date: date | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.cin = cin
        ctx.release_date = release_date
        if release_date is None:
            message = f"User not found with CIN: {cin}"
        else:
            message = (
                f"User not found with CIN: {cin} "
                f"and Release Date: {release_date.isoformat()}"
            )
        super().__init__(
            message, "USER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class InternalError(RegistryError):
    """Unexpected failure. The message is generic; detail stays in logs."""
    def __init__(
        self,
        message: str = GENERIC_ERROR_MESSAGE,
        code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(InternalError):
    """Database operation failed. Detail goes to context.debug_info, not the caller."""
    def __init__(self, detail: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {
            **(ctx.debug_info or {}),
            "detail": f"Database {operation} failed: {detail}",
        }
        super().__init__(
            code="DATABASE_ERROR", category=ErrorCategory.DATABASE,
            context=ctx,
        )
        self.operation = operation
