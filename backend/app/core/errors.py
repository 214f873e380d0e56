"""Error Hierarchy — typed, closed set of failure kinds for the user service.

Invariants:
    - Every error has a kind (ErrorKind), code (str), severity (ErrorSeverity), http_status
    - Exactly five concrete classes, one per ErrorKind — callers branch on a closed set
    - to_response() produces the wire envelope {"error": message}
    - UnclassifiedFailureError never exposes internal detail in its public message

Design Decisions:
    - Single hierarchy with UserServiceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Severity drives logging: routine outcomes (validation, not found, conflict) are
      INFO and never logged as incidents
"""

from enum import Enum

from app.core.domain_types import ErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    ERROR = "error"
    CRITICAL = "critical"


class UserServiceError(Exception):
    """Base exception for all user service errors."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(
        self,
        message: str,
        code: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.http_status = http_status

    @property
    def is_routine(self) -> bool:
        """True for outcomes of normal traffic (not incidents)."""
        return self.severity is ErrorSeverity.INFO

    def to_response(self) -> dict:
        """Convert to the REST error body."""
        return {"error": self.message}


# ─── Routine outcomes (400-level) ───────────────────────────────

class UserValidationError(UserServiceError):
    """Missing, empty, or oversized user field."""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "VALIDATION_ERROR", ErrorSeverity.INFO, 400)
        self.field = field


class EmailConflictError(UserServiceError):
    """Another user already owns the email."""
    kind = ErrorKind.CONFLICT

    def __init__(self, email: str):
        super().__init__("Email already exists", "EMAIL_CONFLICT", ErrorSeverity.INFO, 409)
        self.email = email


class UserNotFoundError(UserServiceError):
    """No user with the requested id."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: object):
        super().__init__("User not found", "USER_NOT_FOUND", ErrorSeverity.INFO, 404)
        self.user_id = user_id


# ─── Infrastructure (500-level) ─────────────────────────────────

class StoreUnavailableError(UserServiceError):
    """Store unreachable, pool exhausted past its wait bound, or query timed out."""
    kind = ErrorKind.UNAVAILABLE

    def __init__(self, operation: str, reason: str = "Database unavailable"):
        super().__init__(reason, "STORE_UNAVAILABLE", ErrorSeverity.CRITICAL, 503)
        self.operation = operation


class UnclassifiedFailureError(UserServiceError):
    """Unexpected internal fault. Detail goes to logs only."""
    kind = ErrorKind.UNCLASSIFIED

    def __init__(self, operation: str, detail: str = ""):
        super().__init__(
            "Internal server error", "INTERNAL_ERROR", ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation
        self.detail = detail
