"""Error Hierarchy — typed, categorized exceptions for every failure a request can hit.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) carry structured details; unexpected failures never do
    - Anything not in this hierarchy is an unexpected failure (500)

Design Decisions:
    - Single hierarchy with ApiError base: one classification point in RestRequest
    - details as list of {"message", "type", "path", "value"}: one entry per offending field
"""

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
    NOT_AUTHORIZED = "not_authorized"
    DATABASE = "database"
    INTERNAL = "internal"


def error_detail(
    message: str, type_: str, path: str | None = None, value: Any = None,
) -> dict[str, Any]:
    """Build one field-level detail entry."""
    return {"message": message, "type": type_, "path": path, "value": value}


class ApiError(Exception):
    """Base exception for all classified API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details or []

    def to_response(self) -> dict:
        """Convert to the structured error body."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "errors": self.details,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationFailedError(ApiError):
    """Submitted attributes failed validation."""
    def __init__(
        self, message: str = "Validation error",
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400, details,
        )


class UniqueConstraintError(ApiError):
    """A unique key already holds the submitted value."""
    def __init__(
        self, message: str = "Validation error",
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            message, "UNIQUE_CONSTRAINT_ERROR", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409, details,
        )

    @property
    def fields(self) -> list[str]:
        return [d["path"] for d in self.details if d.get("path")]


class ResourceNotFoundError(ApiError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str = "Resource", resource_id: Any = None):
        super().__init__(
            f"{resource_type} with ID {resource_id} could not be found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class NotAuthorizedError(ApiError):
    """Credential missing, invalid, or not matching a live principal."""
    def __init__(self, reason: str = "not authorized"):
        super().__init__(
            reason, "NOT_AUTHORIZED", ErrorCategory.NOT_AUTHORIZED,
            ErrorSeverity.WARNING, 401,
        )


# ─── Server Errors (500-level) ──────────────────────────────────

class UnexpectedFailureError(ApiError):
    """Infrastructure failure surfaced explicitly as a server error."""
    def __init__(self, message: str):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )


class DatabaseError(ApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation
