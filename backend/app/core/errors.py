"""Error Hierarchy - typed, categorized exceptions for every dispatch failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Pre-execution rejections (module, request, auth) carry their transport status
    - to_response() produces the REST error envelope used by the global handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LegalError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
    - Handler-level failures (not found, conflict, bad credentials) are raised by
      handlers and normalized into failure envelopes by the dispatcher; only the
      rejection subclasses ever reach the transport directly
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    module: str | None = None
    request_name: str | None = None
    request_id: str | None = None
    debug_info: dict[str, Any] | None = None


class LegalError(Exception):
    """Base exception for all Legal Admin errors."""

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

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "module": self.context.module,
                    "request_name": self.context.request_name,
                    "request_id": self.context.request_id,
                },
            }
        }


# ─── Dispatch Rejections (4xx, raised to the transport) ─────────

class InvalidRequestError(LegalError):
    """Request envelope is malformed (missing RequestName, not an object)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidModuleError(LegalError):
    """Module name is unknown or has no registered handlers."""
    def __init__(self, module: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid module {module}",
            "INVALID_MODULE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.module = module


class HandlerNotFoundError(LegalError):
    """Request name does not resolve within the module/kind."""
    def __init__(
        self, module: str, request_name: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Handler not found for request {request_name} in module {module}.",
            "HANDLER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 400,
        )
        self.module = module
        self.request_name = request_name


class UnauthorizedError(LegalError):
    """Handler requires a caller identity and none was presented."""
    def __init__(
        self, message: str = "Access token is not provided.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(LegalError):
    """Public route used against a handler that is not anonymous-allowed."""
    def __init__(
        self, message: str = "Request is not available on the public route.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class BindingError(LegalError):
    """Payload is not structurally compatible with the parameter type."""
    def __init__(self, violations: list, context: ErrorContext | None = None):
        super().__init__(
            "; ".join(v.message for v in violations) or "Invalid parameter.",
            "BINDING_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.violations = violations


class ValidationFailedError(LegalError):
    """Parameter bound but broke one or more of its rules."""
    def __init__(self, violations: list, context: ErrorContext | None = None):
        super().__init__(
            "; ".join(v.message for v in violations),
            "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.violations = violations


# ─── Handler-Level Errors (normalized into failure envelopes) ───

class ResourceNotFoundError(LegalError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidCredentialsError(LegalError):
    """Username/password pair does not match a stored user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid username or password.",
            "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ConflictError(LegalError):
    """Resource already exists or was concurrently modified."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class BusinessRuleError(LegalError):
    """A handler-level rule rejected the operation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BUSINESS_RULE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class RequestCancelledError(LegalError):
    """Caller went away before the handler finished."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Request was cancelled.",
            "CANCELLED", ErrorCategory.INTERNAL,
            ErrorSeverity.WARNING, context, 499,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LegalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class RegistryFrozenError(LegalError):
    """Registration attempted after the registry was frozen."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Module registry is frozen; handlers can only be registered at startup.",
            "REGISTRY_FROZEN", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DuplicateHandlerError(LegalError):
    """Two different handler types derive the same name in one module."""
    def __init__(self, module: str, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Handler name {name} is already registered in module {module}.",
            "DUPLICATE_HANDLER", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
