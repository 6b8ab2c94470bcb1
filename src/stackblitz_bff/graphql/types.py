"""
GraphQL types for the StackBlitz BFF.

``Project`` and ``User`` implement the ``Node`` interface, so ``node(id)``
can return either without the caller knowing the kind in advance. Their
``is_type_of`` hooks classify untyped payloads by shape; typed instances
are matched directly.

Python attribute names are snake_case; strawberry exposes them camelCased
(``created_at`` -> ``createdAt``).
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Optional

import strawberry
from strawberry.scalars import JSON

from stackblitz_bff.graphql.global_id import PROJECT, USER, decode_local_id
from stackblitz_bff.graphql.node import resolve_node_type

if TYPE_CHECKING:
    from stackblitz_bff.graphql.context import GraphQLContext


# =============================================================================
# Node Interface
# =============================================================================


@strawberry.interface(description="An object with a global ID")
class Node:
    id: strawberry.ID


# =============================================================================
# Input Types
# =============================================================================


@strawberry.input
class ProjectFilters:
    user_id: str | None = None
    tag: str | None = None
    search: str | None = None
    template: str | None = None


@strawberry.input
class PaginationInput:
    first: int | None = None
    after: str | None = None


@strawberry.input
class CreateProjectInput:
    title: str
    files: JSON
    template: str
    description: str | None = None
    dependencies: Optional[JSON] = None
    settings: Optional[JSON] = None
    tags: list[str] | None = None
    open_file: str | None = None


@strawberry.input
class UpdateProjectInput:
    title: str | None = None
    description: str | None = None
    files: Optional[JSON] = None
    dependencies: Optional[JSON] = None
    settings: Optional[JSON] = None
    tags: list[str] | None = None
    open_file: str | None = None


def input_to_dict(input_obj: Any) -> dict[str, Any] | None:
    """Convert an input object to a backend payload.

    Keys are camelCased to match the REST API and ``None`` values are
    dropped. Plain mappings pass through with ``None`` values dropped.
    """
    if input_obj is None:
        return None
    if dataclasses.is_dataclass(input_obj) and not isinstance(input_obj, type):
        data = {
            _camel_case(f.name): getattr(input_obj, f.name)
            for f in dataclasses.fields(input_obj)
        }
    elif isinstance(input_obj, dict):
        data = dict(input_obj)
    else:
        data = {k: v for k, v in vars(input_obj).items() if not k.startswith("_")}
    return {k: v for k, v in data.items() if v is not None}


def _camel_case(name: str) -> str:
    """Convert snake_case to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# =============================================================================
# Pagination Types
# =============================================================================


@strawberry.type
class PageInfo:
    has_next_page: bool
    end_cursor: str | None = None


@strawberry.type
class ProjectEdge:
    cursor: str
    node: Project


@strawberry.type
class ProjectConnection:
    edges: list[ProjectEdge]
    page_info: PageInfo


@strawberry.type
class UserEdge:
    cursor: str
    node: User


@strawberry.type
class UserConnection:
    edges: list[UserEdge]
    page_info: PageInfo


# =============================================================================
# Entity Types
# =============================================================================


@strawberry.type(description="A StackBlitz project")
class Project(Node):
    title: str
    description: str | None = None
    files: JSON = strawberry.field(default_factory=dict)
    template: str | None = None
    dependencies: Optional[JSON] = None
    settings: Optional[JSON] = None
    tags: list[str] | None = None
    created_at: str | None = None
    updated_at: str | None = None
    open_file: str | None = None

    # Kept for owner resolution, not exposed
    owner_payload: strawberry.Private[dict[str, Any] | None] = None
    owner_id: strawberry.Private[str | None] = None

    @classmethod
    def is_type_of(cls, obj: Any, _info: Any) -> bool:
        return isinstance(obj, cls) or resolve_node_type(obj) == PROJECT

    @strawberry.field(description="The user who owns this project")
    async def owner(self, info: strawberry.Info) -> User:
        ctx: GraphQLContext = info.context
        return await ctx.stackblitz.fetch_project_owner(self)


@strawberry.type(description="A StackBlitz user")
class User(Node):
    username: str
    display_name: str | None = None
    url: str | None = None
    avatar_url: str | None = None

    @classmethod
    def is_type_of(cls, obj: Any, _info: Any) -> bool:
        return isinstance(obj, cls) or resolve_node_type(obj) == USER

    @strawberry.field(description="Projects owned by this user")
    async def projects(
        self,
        info: strawberry.Info,
        filters: ProjectFilters | None = None,
        pagination: PaginationInput | None = None,
    ) -> ProjectConnection:
        ctx: GraphQLContext = info.context
        return await ctx.stackblitz.fetch_user_projects(
            decode_local_id(self.id, USER),
            input_to_dict(filters),
            input_to_dict(pagination),
        )


# =============================================================================
# Mutation Payloads
# =============================================================================


@strawberry.type
class ProjectPayload:
    project: Project


@strawberry.type
class DeleteProjectPayload:
    success: bool


__all__ = [
    "CreateProjectInput",
    "DeleteProjectPayload",
    "Node",
    "PageInfo",
    "PaginationInput",
    "Project",
    "ProjectConnection",
    "ProjectEdge",
    "ProjectFilters",
    "ProjectPayload",
    "UpdateProjectInput",
    "User",
    "UserConnection",
    "UserEdge",
    "input_to_dict",
]
