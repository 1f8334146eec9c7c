"""Error Hierarchy — typed, categorized exceptions for every ledger failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every domain error is raised before any state mutation or port call
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrowdfundError base: FastAPI global handler catches all
    - Error instances double as tagged result variants: enforce_lifecycle returns them,
      the controller raises them (validate-then-commit)
    - TransferFailedError kept distinct from domain errors so port rejections
      show up separately in logs and metrics
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
    LIFECYCLE = "lifecycle"
    AUTHORIZATION = "authorization"
    ECONOMIC_STATE = "economic_state"
    TRANSFER = "transfer"
    CONFIGURATION = "configuration"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: int | None = None
    account: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class CrowdfundError(Exception):
    """Base exception for all ledger errors."""

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
                    "project_id": self.context.project_id,
                    "account": self.context.account,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Validation Errors (caller input) ───────────────────────────

class InvalidGoalError(CrowdfundError):
    """Project goal is not a positive amount."""
    def __init__(self, goal: int, context: ErrorContext | None = None):
        super().__init__(
            f"Goal must be positive, got {goal}",
            "INVALID_GOAL", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.goal = goal


class InvalidDeadlineError(CrowdfundError):
    """Project deadline is not strictly in the future."""
    def __init__(self, deadline: int, now: int, context: ErrorContext | None = None):
        super().__init__(
            f"Deadline {deadline} must be after current time {now}",
            "INVALID_DEADLINE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.deadline = deadline
        self.now = now


class InvalidProjectIdError(CrowdfundError):
    """Project id outside [1, count()]."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Project {project_id} does not exist",
            "INVALID_PROJECT_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 404,
        )
        self.project_id = project_id


class InvalidAmountError(CrowdfundError):
    """Funding amount is not positive."""
    def __init__(self, amount: int, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be positive, got {amount}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.amount = amount


# ─── Lifecycle Errors (temporal state) ──────────────────────────

class DeadlineAlreadyPassedError(CrowdfundError):
    """Funding attempted at or after the project deadline."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Deadline of project {project_id} has already passed",
            "DEADLINE_ALREADY_PASSED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.WARNING, context, 409,
        )


class DeadlineNotPassedYetError(CrowdfundError):
    """Close attempted before the project deadline."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Deadline of project {project_id} has not passed yet",
            "DEADLINE_NOT_PASSED_YET", ErrorCategory.LIFECYCLE,
            ErrorSeverity.WARNING, context, 409,
        )


class ProjectAlreadyEndedError(CrowdfundError):
    """Close attempted on a project that is already closed."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Project {project_id} has already ended",
            "PROJECT_ALREADY_ENDED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.WARNING, context, 409,
        )


class ProjectNotEndedYetError(CrowdfundError):
    """Withdrawal attempted on a project that is still open."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Project {project_id} has not ended yet",
            "PROJECT_NOT_ENDED_YET", ErrorCategory.LIFECYCLE,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Authorization Errors ───────────────────────────────────────

class CallerNotProjectOwnerError(CrowdfundError):
    """Caller is not the owner of the project."""
    def __init__(self, project_id: int, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"Caller is not the owner of project {project_id}",
            "CALLER_NOT_PROJECT_OWNER", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.caller = caller


class ReservedAccountError(CrowdfundError):
    """The ledger's custody account cannot act as a contributor or owner."""
    def __init__(self, account: str, context: ErrorContext | None = None):
        super().__init__(
            f"Account {account!r} is reserved for custody",
            "RESERVED_ACCOUNT", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.account = account


# ─── Economic-State Errors ──────────────────────────────────────

class CannotWithdrawFromSuccessfulProjectError(CrowdfundError):
    """Withdrawal attempted after funds were swept to the owner."""
    def __init__(self, project_id: int, context: ErrorContext | None = None):
        super().__init__(
            f"Project {project_id} succeeded; pledges were paid out to the owner",
            "CANNOT_WITHDRAW_FROM_SUCCESSFUL_PROJECT", ErrorCategory.ECONOMIC_STATE,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class TransferFailedError(CrowdfundError):
    """Value-Transfer Port rejected a movement; the operation was rolled back."""
    def __init__(
        self,
        direction: str,
        source: str,
        destination: str,
        amount: int,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        super().__init__(
            f"Token transfer ({direction}) of {amount} was rejected",
            "TRANSFER_FAILED", ErrorCategory.TRANSFER,
            severity, context, 502,
        )
        self.direction = direction
        self.source = source
        self.destination = destination
        self.amount = amount


class ConfigurationError(CrowdfundError):
    """Invalid fee or account configuration, detected at startup."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(CrowdfundError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
