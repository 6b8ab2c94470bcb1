"""
GraphQL BFF layer over the StackBlitz REST API.

Key components:
- global_id: Global object identifiers (base64 of "Kind:localId")
- connection: REST list responses as connections/edges
- node: Node resolution by global id
- types / resolvers: Strawberry schema
- context: Per-request GraphQL context
- integration: FastAPI/Strawberry integration
- adapters: REST transport and the StackBlitz adapter
"""

from stackblitz_bff.graphql.adapters import (
    AdapterConfig,
    AdapterError,
    AdapterResult,
    ErrorCategory,
    ErrorSeverity,
    NormalizedError,
    StackBlitzAdapter,
    normalize_error,
)
from stackblitz_bff.graphql.connection import to_connection
from stackblitz_bff.graphql.context import GraphQLContext
from stackblitz_bff.graphql.errors import (
    InvalidArgumentError,
    InvalidEntityError,
    InvalidIdentifierError,
    MalformedResponseError,
    OperationFailedError,
    TranslationError,
)
from stackblitz_bff.graphql.global_id import from_global_id, to_global_id
from stackblitz_bff.graphql.integration import (
    create_graphql_app,
    create_schema,
    mount_graphql,
    print_schema,
)
from stackblitz_bff.graphql.node import resolve_node, resolve_node_type

__all__ = [
    # Core components
    "GraphQLContext",
    "create_graphql_app",
    "create_schema",
    "mount_graphql",
    "print_schema",
    # Translation
    "from_global_id",
    "to_global_id",
    "to_connection",
    "resolve_node",
    "resolve_node_type",
    # Adapter interface
    "StackBlitzAdapter",
    "AdapterConfig",
    "AdapterResult",
    "AdapterError",
    # Errors
    "TranslationError",
    "InvalidArgumentError",
    "InvalidIdentifierError",
    "MalformedResponseError",
    "InvalidEntityError",
    "OperationFailedError",
    # Error normalization
    "NormalizedError",
    "ErrorCategory",
    "ErrorSeverity",
    "normalize_error",
]
