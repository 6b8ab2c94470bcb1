"""
Root resolvers for the StackBlitz BFF.

Query and Mutation fields decode their ids, convert input objects to REST
payloads, and delegate to the adapter on ``info.context.stackblitz``.
Typed ids (``project``, ``user``, mutations) must name the expected kind;
only ``node`` accepts any kind.
"""

from __future__ import annotations

import strawberry

from stackblitz_bff.graphql.global_id import PROJECT, USER, decode_local_id
from stackblitz_bff.graphql.node import resolve_node
from stackblitz_bff.graphql.types import (
    CreateProjectInput,
    DeleteProjectPayload,
    Node,
    PaginationInput,
    Project,
    ProjectConnection,
    ProjectFilters,
    ProjectPayload,
    UpdateProjectInput,
    User,
    UserConnection,
    input_to_dict,
)


@strawberry.type
class Query:
    @strawberry.field(description="Fetch any object by its global ID")
    async def node(self, info: strawberry.Info, id: strawberry.ID) -> Node | None:
        return await resolve_node(info.context.stackblitz, id)

    @strawberry.field(description="List projects")
    async def projects(
        self,
        info: strawberry.Info,
        filters: ProjectFilters | None = None,
        pagination: PaginationInput | None = None,
    ) -> ProjectConnection:
        return await info.context.stackblitz.fetch_projects(
            input_to_dict(filters), input_to_dict(pagination)
        )

    @strawberry.field(description="Fetch a project by its global ID")
    async def project(
        self, info: strawberry.Info, id: strawberry.ID
    ) -> Project | None:
        return await info.context.stackblitz.fetch_project(decode_local_id(id, PROJECT))

    @strawberry.field(description="List users")
    async def users(
        self,
        info: strawberry.Info,
        pagination: PaginationInput | None = None,
    ) -> UserConnection:
        return await info.context.stackblitz.fetch_users(input_to_dict(pagination))

    @strawberry.field(description="Fetch a user by its global ID")
    async def user(self, info: strawberry.Info, id: strawberry.ID) -> User | None:
        return await info.context.stackblitz.fetch_user(decode_local_id(id, USER))


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Create a project")
    async def create_project(
        self, info: strawberry.Info, input: CreateProjectInput
    ) -> ProjectPayload:
        result = await info.context.stackblitz.create_project(input_to_dict(input) or {})
        return ProjectPayload(project=result["project"])

    @strawberry.mutation(description="Update fields of a project")
    async def update_project(
        self,
        info: strawberry.Info,
        id: strawberry.ID,
        input: UpdateProjectInput,
    ) -> ProjectPayload:
        local_id = decode_local_id(id, PROJECT)
        result = await info.context.stackblitz.update_project(local_id, input_to_dict(input))
        return ProjectPayload(project=result["project"])

    @strawberry.mutation(description="Delete a project")
    async def delete_project(
        self, info: strawberry.Info, id: strawberry.ID
    ) -> DeleteProjectPayload:
        result = await info.context.stackblitz.delete_project(decode_local_id(id, PROJECT))
        return DeleteProjectPayload(success=result["success"])

    @strawberry.mutation(description="Fork a project")
    async def fork_project(
        self,
        info: strawberry.Info,
        id: strawberry.ID,
        input: UpdateProjectInput | None = None,
    ) -> ProjectPayload:
        local_id = decode_local_id(id, PROJECT)
        result = await info.context.stackblitz.fork_project(local_id, input_to_dict(input))
        return ProjectPayload(project=result["project"])


__all__ = ["Mutation", "Query"]
