"""Error Hierarchy — typed, categorized failures for every onboarding failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Expected failures (401/403/400) are never sent to reporters
    - to_response() produces the client envelope: message + code, never a cause chain

Design Decisions:
    - Single hierarchy with OnboardingError base: one global handler catches all (ADR: uniform error shape)
    - Domain failures are returned as values by services (core/result.py), raised only at the HTTP edge
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    REPORTING = "reporting"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and reporters (never sent to clients)."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor_id: str | None = None
    action: str | None = None
    path: str | None = None


class OnboardingError(Exception):
    """Base exception for all onboarding errors."""

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

    @property
    def reportable(self) -> bool:
        """Expected client failures stay out of telemetry."""
        return self.category not in (
            ErrorCategory.AUTHENTICATION,
            ErrorCategory.AUTHORIZATION,
            ErrorCategory.VALIDATION,
            ErrorCategory.RESOURCE_NOT_FOUND,
        )

    def to_response(self) -> dict:
        """Convert to the client error envelope."""
        return {"error": self.message, "code": self.code}


# ─── Client Errors (400-level) ──────────────────────────────────

class NotAuthenticatedError(OnboardingError):
    """No actor could be resolved for the request."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You are not authenticated",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )

    def to_response(self) -> dict:
        return {"error": self.message}


class NotAuthorizedError(OnboardingError):
    """Actor lacks the capability for the requested action."""
    def __init__(self, description: str, context: ErrorContext | None = None):
        super().__init__(
            f"You are not authorized to {description}",
            "NOT_AUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )

    def to_response(self) -> dict:
        return {"error": self.message}


class PayloadValidationError(OnboardingError):
    """Payload violated one or more field rules."""
    def __init__(
        self, fields: dict[str, list[str]], context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Invalid fields: {', '.join(fields)}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.fields = fields

    def to_response(self) -> dict:
        return {"errors": self.fields}


class AlreadyExistsError(OnboardingError):
    """A record with the same unique value already exists."""
    def __init__(self, field: str, value: str, context: ErrorContext | None = None):
        super().__init__(
            f"A user with the {field} {value} already exists!",
            "ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.field = field
        self.value = value


class ResourceNotFoundError(OnboardingError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ReporterUnavailableError(OnboardingError):
    """An exception reporter could not be constructed."""
    def __init__(self, reporter: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Reporter '{reporter}' is unavailable: {reason}",
            "REPORTER_UNAVAILABLE", ErrorCategory.REPORTING,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.reporter = reporter


class InternalError(OnboardingError):
    """Unexpected failure; the cause is kept for reporters only."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.cause = cause
        self.__cause__ = cause


class DatabaseError(OnboardingError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
