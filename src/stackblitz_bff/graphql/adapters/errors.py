"""
Error normalization for the GraphQL layer.

Any exception a resolver can raise (transport errors from the adapter,
translation errors such as bad global ids, or anything unexpected) is
reduced to one ``NormalizedError``. That single shape feeds both the
``extensions`` clients see and the structured context written to logs.

Example:
    try:
        project = await adapter.fetch_project(local_id)
    except OperationFailedError as e:
        normalized = normalize_error(e)
        logger.warning("fetch failed", extra={"context": normalized.to_log_dict()})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, NamedTuple

DEFAULT_SERVICE = "stackblitz"


class ErrorCategory(Enum):
    """What kind of failure happened, independent of the backend."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    INVALID_IDENTIFIER = "invalid_identifier"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    BAD_RESPONSE = "bad_response"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


class ErrorSeverity(Enum):
    """Log level an error deserves.

    INFO is for caller mistakes, WARNING for backend conditions that clear
    up on their own, and ERROR for anything that needs a look.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class NormalizedError:
    """Backend-independent description of a failure.

    Attributes:
        code: Machine-readable code, e.g. ``STACKBLITZ_NOT_FOUND``
        category: Failure kind
        severity: Log level to report it at
        user_message: Text safe to show to an end user
        developer_message: The original error text
        service_name: Backend the failure relates to
        status_code: HTTP status, where one applies
        operation: Adapter operation that failed, when known
        details: Structured details (usually the backend's error body)
        timestamp: When the error was normalized
        retry_after: Backend's retry hint in seconds, for 429s
        field_errors: Per-field messages for rejected input
    """

    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    user_message: str
    developer_message: str
    service_name: str
    status_code: int | None = None
    operation: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    retry_after: float | None = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def to_graphql_extensions(self) -> dict[str, Any]:
        """Client-facing extensions. Empty optional values are left out."""
        extensions: dict[str, Any] = {
            "code": self.code,
            "category": self.category.value,
            "service": self.service_name,
        }
        optional = {
            "statusCode": self.status_code,
            "operation": self.operation,
            "retryAfter": self.retry_after,
            "fieldErrors": self.field_errors,
        }
        extensions.update((key, value) for key, value in optional.items() if value)
        return extensions

    def to_log_dict(self) -> dict[str, Any]:
        """Flat dict for the ``context`` of a structured log record."""
        return {
            "error_code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "user_message": self.user_message,
            "developer_message": self.developer_message,
            "service_name": self.service_name,
            "status_code": self.status_code,
            "operation": self.operation,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "retry_after": self.retry_after,
            "field_errors": self.field_errors,
        }


class _Classification(NamedTuple):
    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    user_message: str
    status_code: int | None


def normalize_error(
    error: BaseException,
    *,
    service_name: str | None = None,
) -> NormalizedError:
    """Reduce any exception to a NormalizedError.

    An ``OperationFailedError`` normalizes like the failure it wraps, with
    its operation name and message added.

    Args:
        error: Exception to describe
        service_name: Backend name to use instead of the one on the error
    """
    from stackblitz_bff.graphql.adapters.base import AdapterError
    from stackblitz_bff.graphql.errors import OperationFailedError, TranslationError

    if isinstance(error, OperationFailedError):
        normalized = normalize_error(error.cause, service_name=service_name)
        normalized.operation = error.operation
        normalized.developer_message = str(error)
        return normalized

    if isinstance(error, AdapterError):
        svc = service_name or (
            error.service_name if error.service_name != "unknown" else DEFAULT_SERVICE
        )
        found = _classify_transport(error, svc)
        return NormalizedError(
            code=found.code,
            category=found.category,
            severity=found.severity,
            user_message=found.user_message,
            developer_message=str(error),
            service_name=svc,
            status_code=found.status_code,
            details=error.details,
            retry_after=error.retry_after,
            field_errors=_field_errors(error.details),
        )

    svc = service_name or DEFAULT_SERVICE
    if isinstance(error, TranslationError):
        found = _classify_translation(error, svc)
        return NormalizedError(
            code=found.code,
            category=found.category,
            severity=found.severity,
            user_message=found.user_message,
            developer_message=str(error),
            service_name=svc,
            status_code=found.status_code,
            operation=getattr(error, "operation", None),
        )

    return NormalizedError(
        code="INTERNAL_ERROR",
        category=ErrorCategory.INTERNAL,
        severity=ErrorSeverity.ERROR,
        user_message="An unexpected error occurred. Please try again.",
        developer_message=f"{type(error).__name__}: {error}",
        service_name=svc,
        status_code=500,
        details={"exception_type": type(error).__name__},
    )


def _classify_transport(error: Any, svc: str) -> _Classification:
    from stackblitz_bff.graphql.adapters.base import (
        ApiError,
        AuthenticationError,
        RateLimitError,
        TimeoutError,
        ValidationError,
    )

    prefix = svc.upper()

    if isinstance(error, AuthenticationError):
        if (error.status_code or 401) == 401:
            return _Classification(
                f"{prefix}_AUTHENTICATION_REQUIRED",
                ErrorCategory.AUTHENTICATION,
                ErrorSeverity.WARNING,
                "Authentication required. Check the configured API key.",
                401,
            )
        return _Classification(
            f"{prefix}_ACCESS_DENIED",
            ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING,
            "You don't have permission to access this resource.",
            error.status_code,
        )

    if isinstance(error, RateLimitError):
        wait = f"in {int(error.retry_after)} seconds" if error.retry_after else "later"
        return _Classification(
            f"{prefix}_RATE_LIMIT_EXCEEDED",
            ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING,
            f"Too many requests. Please try again {wait}.",
            429,
        )

    if isinstance(error, TimeoutError):
        return _Classification(
            f"{prefix}_TIMEOUT",
            ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING,
            f"The {svc} service is taking too long to respond. Please try again.",
            504,
        )

    if isinstance(error, ValidationError):
        return _Classification(
            f"{prefix}_VALIDATION_ERROR",
            ErrorCategory.VALIDATION,
            ErrorSeverity.INFO,
            "Please check your input and try again.",
            400,
        )

    if isinstance(error, ApiError):
        # Connection failures carry no status; report them as server errors
        status = error.status_code or 500
        if status == 404:
            return _Classification(
                f"{prefix}_NOT_FOUND",
                ErrorCategory.NOT_FOUND,
                ErrorSeverity.INFO,
                "The requested resource was not found.",
                status,
            )
        if status < 500:
            return _Classification(
                f"{prefix}_CLIENT_ERROR",
                ErrorCategory.EXTERNAL_SERVICE,
                ErrorSeverity.WARNING,
                f"The {svc} service rejected the request.",
                status,
            )
        return _Classification(
            f"{prefix}_SERVER_ERROR",
            ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.ERROR,
            f"The {svc} service is temporarily unavailable. Please try again later.",
            status,
        )

    return _Classification(
        f"{prefix}_ERROR",
        ErrorCategory.EXTERNAL_SERVICE,
        ErrorSeverity.ERROR,
        f"An error occurred with the {svc} service. Please try again.",
        error.status_code,
    )


def _classify_translation(error: Any, svc: str) -> _Classification:
    from stackblitz_bff.graphql.errors import (
        InvalidArgumentError,
        InvalidEntityError,
        InvalidIdentifierError,
    )

    if isinstance(error, InvalidIdentifierError | InvalidArgumentError):
        return _Classification(
            "INVALID_IDENTIFIER",
            ErrorCategory.INVALID_IDENTIFIER,
            ErrorSeverity.INFO,
            "The given ID is not valid.",
            400,
        )

    suffix = "INVALID_ENTITY" if isinstance(error, InvalidEntityError) else "MALFORMED_RESPONSE"
    return _Classification(
        f"{svc.upper()}_{suffix}",
        ErrorCategory.BAD_RESPONSE,
        ErrorSeverity.ERROR,
        f"The {svc} service returned an unexpected response.",
        502,
    )


def _field_errors(details: dict[str, Any]) -> dict[str, list[str]]:
    """Per-field messages from ``details["fields"]``, each as a list."""
    fields = details.get("fields")
    if not isinstance(fields, dict):
        return {}
    return {
        name: messages if isinstance(messages, list) else [str(messages)]
        for name, messages in fields.items()
    }


__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "NormalizedError",
    "normalize_error",
]
