"""
REST adapters for the GraphQL BFF layer.

Provides the transport base for REST backends and the StackBlitz adapter
built on it, plus the error normalization shared by both.
"""

from stackblitz_bff.graphql.adapters.base import (
    AdapterConfig,
    AdapterError,
    AdapterResponse,
    AdapterResult,
    ApiError,
    AuthenticationError,
    BaseRestAdapter,
    RateLimitError,
    TimeoutError,
    ValidationError,
)
from stackblitz_bff.graphql.adapters.errors import (
    ErrorCategory,
    ErrorSeverity,
    NormalizedError,
    normalize_error,
)
from stackblitz_bff.graphql.adapters.stackblitz import (
    StackBlitzAdapter,
    normalize_project,
    normalize_user,
)

__all__ = [
    # Base adapter
    "BaseRestAdapter",
    "AdapterConfig",
    # Response types
    "AdapterResponse",
    "AdapterResult",
    # Error types
    "AdapterError",
    "ApiError",
    "AuthenticationError",
    "RateLimitError",
    "TimeoutError",
    "ValidationError",
    # Error normalization
    "NormalizedError",
    "ErrorCategory",
    "ErrorSeverity",
    "normalize_error",
    # StackBlitz
    "StackBlitzAdapter",
    "normalize_project",
    "normalize_user",
]
