"""Error Hierarchy — typed, categorized exceptions for every client failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ApiError is the only error carrying an HTTP status; transient flag decides retry
    - to_dict() never includes the API key (credentials are not part of ErrorContext)
    - Errors propagate unchanged to the caller — nothing here logs or swallows

Design Decisions:
    - Single hierarchy with OrbError base: callers can catch everything in one clause
    - ErrorContext as dataclass: request metadata for debugging without coupling to logging
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories, one per failure kind."""
    USAGE = "usage"
    TRANSPORT = "transport"
    API = "api"
    DECODE = "decode"
    UNEXPECTED_RESPONSE = "unexpected_response"


@dataclass
class ErrorContext:
    """Request metadata attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    path: str | None = None
    attempt: int | None = None
    idempotency_key: str | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class OrbError(Exception):
    """Base exception for all client errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a plain dict (log payloads, error reports)."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "method": self.context.method,
                "path": self.context.path,
                "attempt": self.context.attempt,
                "idempotency_key": self.context.idempotency_key,
                "retry_after_ms": self.context.retry_after_ms,
            },
        }


# ─── Local Errors (no network attempt) ──────────────────────────

class UsageError(OrbError):
    """Operation or parameters malformed before any request was sent."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "USAGE_ERROR", ErrorCategory.USAGE,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class DecodeError(OrbError):
    """A 2xx response body did not match the expected schema."""

    BODY_PREVIEW_CHARS = 500

    def __init__(
        self,
        message: str,
        type_name: str,
        body: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Failed to decode {type_name}: {message}",
            "DECODE_ERROR", ErrorCategory.DECODE,
            ErrorSeverity.CRITICAL, context,
        )
        self.type_name = type_name
        self.body = body[: self.BODY_PREVIEW_CHARS] if body else body


class UnexpectedResponseError(OrbError):
    """Response decoded but contradicts itself (e.g. deleted shape with deleted=false)."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unexpected response: {detail}",
            "UNEXPECTED_RESPONSE", ErrorCategory.UNEXPECTED_RESPONSE,
            ErrorSeverity.CRITICAL, context,
        )
        self.detail = detail


# ─── Remote Errors ──────────────────────────────────────────────

class TransportError(OrbError):
    """Connection, protocol or timeout failure in the HTTP transport."""
    def __init__(self, message: str, cause: Exception | None = None, context: ErrorContext | None = None):
        super().__init__(
            f"Transport failure: {message}",
            "TRANSPORT_ERROR", ErrorCategory.TRANSPORT,
            ErrorSeverity.ERROR, context,
        )
        self.cause = cause


class ApiError(OrbError):
    """Non-2xx response from the Orb API.

    For details, see: https://docs.withorb.com/reference/error-responses
    """
    def __init__(
        self,
        status_code: int,
        title: str | None = None,
        detail: str | None = None,
        error_type: str | None = None,
        validation_errors: list[Any] | None = None,
        body: str | None = None,
        transient: bool = False,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        # copy: the caller's context is shared across attempts
        ctx = replace(context or ErrorContext(), retry_after_ms=retry_after_ms)
        summary = title or f"HTTP {status_code}"
        if detail:
            summary = f"{summary}: {detail}"
        super().__init__(
            f"Orb API error ({status_code}): {summary}",
            "API_ERROR", ErrorCategory.API,
            ErrorSeverity.WARNING if transient else ErrorSeverity.ERROR, ctx,
        )
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.error_type = error_type
        self.validation_errors = validation_errors or []
        self.body = body
        self.transient = transient

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["error_type"] = self.error_type
        data["title"] = self.title
        data["detail"] = self.detail
        data["validation_errors"] = self.validation_errors
        data["transient"] = self.transient
        return data
