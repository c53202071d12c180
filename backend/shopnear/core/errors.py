"""Error Hierarchy — typed, categorized exceptions for every shop-near-u failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are 4xx; storage failures are 5xx
    - to_response() produces the {success, message, error} envelope
    - Authentication failures never say which check failed

Design Decisions:
    - Single hierarchy with ShopNearError base: one global handler serves all
    - InvalidToken/ExpiredToken are codec-level; the auth guard converts them
      to UnauthorizedError before they reach a client
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
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs (never sent verbatim to clients)."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    shop_id: int | None = None
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class ShopNearError(Exception):
    """Base exception for all shop-near-u errors."""

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
        """Convert to the standard error envelope."""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Authentication (401) ───────────────────────────────────────

class InvalidTokenError(ShopNearError):
    """Token signature, algorithm, structure or claims are invalid."""
    def __init__(self, reason: str = "invalid token", context: ErrorContext | None = None):
        super().__init__(
            "invalid token", "INVALID_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.reason = reason


class ExpiredTokenError(ShopNearError):
    """Token expiration time is in the past."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "token expired", "EXPIRED_TOKEN", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class UnauthorizedError(ShopNearError):
    """Missing credentials, or identity/role does not satisfy the gate."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "unauthorized", "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(ShopNearError):
    """Login failed. Same error for unknown email and wrong password."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "invalid credentials", "INVALID_CREDENTIALS",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class AlreadySubscribedError(ShopNearError):
    """User already holds a subscription to the shop."""
    def __init__(self, shop_id: int, user_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.shop_id, ctx.user_id = shop_id, user_id
        super().__init__(
            "User is already subscribed to this shop", "ALREADY_SUBSCRIBED",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.INFO, ctx, 400,
        )


class NotSubscribedError(ShopNearError):
    """User holds no subscription to the shop."""
    def __init__(self, shop_id: int, user_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.shop_id, ctx.user_id = shop_id, user_id
        super().__init__(
            "User is not subscribed to this shop", "NOT_SUBSCRIBED",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.INFO, ctx, 400,
        )


class InvalidParameterError(ShopNearError):
    """Malformed geo or pagination input."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(ShopNearError):
    """Requested shop, product or user does not exist."""
    def __init__(
        self, resource_type: str, resource_id: int | str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(ShopNearError):
    """Unique value (e.g. registration email) already taken."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ShopNearError):
    """Unexpected storage failure."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "INTERNAL_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
