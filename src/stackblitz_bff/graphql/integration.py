"""
FastAPI/Strawberry integration for the StackBlitz BFF.

Provides utilities for mounting GraphQL on an existing FastAPI app
or creating a standalone GraphQL application.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx
import strawberry
from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from stackblitz_bff import __version__
from stackblitz_bff.graphql.adapters.errors import ErrorSeverity, normalize_error
from stackblitz_bff.graphql.adapters.stackblitz import StackBlitzAdapter
from stackblitz_bff.graphql.context import make_context_getter
from stackblitz_bff.graphql.resolvers import Mutation, Query
from stackblitz_bff.graphql.types import Project, User
from stackblitz_bff.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

    from stackblitz_bff.config import Settings

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
}


class StackBlitzSchema(strawberry.Schema):
    """Schema that logs each resolver error once, normalized."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error or error
            normalized = normalize_error(original)
            logger.log(
                _LOG_LEVELS[normalized.severity],
                f"GraphQL error at {error.path}: {normalized.developer_message}",
                extra={"context": normalized.to_log_dict()},
                exc_info=original if normalized.severity is ErrorSeverity.ERROR else None,
            )


def create_schema() -> StackBlitzSchema:
    """
    Create the Strawberry GraphQL schema.

    Returns:
        Schema with Query and Mutation roots; Project and User are
        registered as the Node implementations.
    """
    return StackBlitzSchema(query=Query, mutation=Mutation, types=[Project, User])


def print_schema() -> str:
    """Return the schema SDL."""
    return create_schema().as_str()


def mount_graphql(
    app: FastAPI,
    adapter: StackBlitzAdapter,
    path: str = "/graphql",
    enable_graphiql: bool = True,
) -> None:
    """
    Mount GraphQL endpoint on an existing FastAPI application.

    Args:
        app: Existing FastAPI application
        adapter: Adapter every request's context exposes
        path: URL path for GraphQL endpoint (default: /graphql)
        enable_graphiql: Enable GraphiQL IDE (default: True)

    Example:
        from fastapi import FastAPI
        from stackblitz_bff.graphql import StackBlitzAdapter, mount_graphql

        app = FastAPI()
        adapter = StackBlitzAdapter(get_settings().to_adapter_config())
        mount_graphql(app, adapter)
        # GraphQL available at /graphql
    """
    graphql_router: GraphQLRouter[Any, Any] = GraphQLRouter(
        create_schema(),
        context_getter=make_context_getter(adapter),
        graphiql=enable_graphiql,
    )
    app.include_router(graphql_router, prefix=path)


def create_graphql_app(
    settings: Settings | None = None,
    path: str = "/graphql",
) -> FastAPI:
    """
    Create a standalone FastAPI application with GraphQL endpoint.

    Logging is configured from the settings here, so a server process
    started by uvicorn (including a reload worker) logs the same way as the
    CLI. One ``httpx.AsyncClient`` is shared by all requests and closed when
    the application shuts down.

    Args:
        settings: Settings to use (default: loaded from the environment)
        path: URL path for GraphQL endpoint (default: /graphql)

    Returns:
        FastAPI application with GraphQL endpoint

    Example:
        app = create_graphql_app()
        # Run with: uvicorn --factory stackblitz_bff.graphql:create_graphql_app
    """
    if settings is None:
        from stackblitz_bff.config import get_settings

        settings = get_settings()

    setup_logging(settings.log_level, json_output=settings.log_json)

    config = settings.to_adapter_config()
    client = httpx.AsyncClient(timeout=config.timeout)
    adapter = StackBlitzAdapter(config, client=client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"StackBlitz BFF serving {config.base_url} at {path}")
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="StackBlitz GraphQL API",
        description="GraphQL BFF for the StackBlitz REST API",
        version=__version__,
        lifespan=lifespan,
    )

    mount_graphql(app, adapter, path=path, enable_graphiql=settings.graphiql)

    return app


__all__ = [
    "StackBlitzSchema",
    "create_graphql_app",
    "create_schema",
    "mount_graphql",
    "print_schema",
]
