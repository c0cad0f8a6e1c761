"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error aborts its operation with no partial mutation (registry unchanged)
    - to_response() produces the REST envelope
    - Core never logs failures; the HTTP shell logs when rendering

Design Decisions:
    - Single hierarchy with OnsRegistryError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTEGRITY = "integrity"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    caller: str | None = None
    entity_type: str | None = None
    entity_key: str | None = None
    debug_info: dict[str, Any] | None = None


class OnsRegistryError(Exception):
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
                    "caller": self.context.caller,
                    "entity_type": self.context.entity_type,
                    "entity_key": self.context.entity_key,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class DuplicateKeyError(OnsRegistryError):
    """Insert of a key that is already present."""
    def __init__(self, entity_type: str, key: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_type, ctx.entity_key = entity_type, key
        super().__init__(
            f"{entity_type} '{key}' already exists",
            "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.entity_type = entity_type
        self.key = key


class NotFoundError(OnsRegistryError):
    """Reference to, query of, or deletion of an absent key."""
    def __init__(self, entity_type: str, key: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_type, ctx.entity_key = entity_type, key
        super().__init__(
            f"{entity_type} '{key}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.entity_type = entity_type
        self.key = key


class ReferentialIntegrityError(OnsRegistryError):
    """Deletion of a parent entity that still has dependents."""
    def __init__(
        self, entity_type: str, key: str, dependents: int,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_type, ctx.entity_key = entity_type, key
        super().__init__(
            f"{entity_type} '{key}' still has {dependents} dependent record(s)",
            "REFERENTIAL_INTEGRITY", ErrorCategory.INTEGRITY,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.entity_type = entity_type
        self.key = key
        self.dependents = dependents


class UnauthorizedError(OnsRegistryError):
    """Mutating call from a caller failing the AccessGate check."""
    def __init__(self, caller: str, required: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.caller = caller
        super().__init__(
            f"Caller '{caller}' is not {required}",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, ctx, 403,
        )
        self.caller = caller
        self.required = required


class FieldValidationError(OnsRegistryError):
    """Field value rejected before any mutation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class IndexOutOfRangeError(OnsRegistryError):
    """Row index beyond the bounds of a child or list collection."""
    def __init__(self, row: int, size: int, context: ErrorContext | None = None):
        super().__init__(
            f"Row {row} out of range for collection of size {size}",
            "INDEX_OUT_OF_RANGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.row = row
        self.size = size


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RegistryCorruptionError(OnsRegistryError):
    """Internal cross-structure invariant broken (bad snapshot or bookkeeping bug)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REGISTRY_CORRUPTION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(OnsRegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
