"""
GraphQL Context for the StackBlitz BFF.

The context is attached to every GraphQL request and provides:
- The StackBlitz adapter resolvers call into
- Request metadata for log correlation
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request
from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from stackblitz_bff.graphql.adapters.stackblitz import StackBlitzAdapter


@dataclass
class GraphQLContext(BaseContext):
    """
    GraphQL request context.

    Attributes:
        stackblitz: Adapter for the StackBlitz REST API, shared by all requests
        request_id: Unique request identifier for tracing
        ip_address: Client IP address (optional)

    The router fills in ``request``, ``response`` and ``background_tasks``
    after the getter returns, so the context is not frozen.

    Example:
        async def project(self, info: Info, id: strawberry.ID) -> Project:
            ctx = info.context
            return await ctx.stackblitz.fetch_project(decode_local_id(id, PROJECT))
    """

    stackblitz: StackBlitzAdapter
    request_id: str | None = None
    ip_address: str | None = None

    def __post_init__(self) -> None:
        super().__init__()


def create_context_from_request(
    request: Request,
    adapter: StackBlitzAdapter,
) -> GraphQLContext:
    """
    Create GraphQL context from an HTTP request.

    The request id comes from the X-Request-ID header, or is generated.

    Args:
        request: Starlette/FastAPI request object
        adapter: Adapter to expose to resolvers

    Returns:
        GraphQLContext populated from request
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    ip_address = request.client.host if request.client else None

    return GraphQLContext(
        stackblitz=adapter,
        request_id=request_id,
        ip_address=ip_address,
    )


def make_context_getter(
    adapter: StackBlitzAdapter,
) -> Callable[[Request], Awaitable[GraphQLContext]]:
    """Build a ``context_getter`` for ``strawberry.fastapi.GraphQLRouter``."""

    async def get_context(request: Request) -> GraphQLContext:
        return create_context_from_request(request, adapter)

    return get_context


__all__ = ["GraphQLContext", "create_context_from_request", "make_context_getter"]
