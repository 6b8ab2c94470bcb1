"""
StackBlitz REST adapter.

Issues the REST calls behind every GraphQL field and normalizes the raw
payloads into ``Project`` / ``User`` instances carrying global ids.

Endpoints:
    GET    /projects                  fetch_projects
    GET    /projects/{id}             fetch_project
    GET    /users                     fetch_users
    GET    /users/{id}                fetch_user
    GET    /users/{id}/projects       fetch_user_projects
    POST   /projects                  create_project
    PATCH  /projects/{id}             update_project
    DELETE /projects/{id}             delete_project
    POST   /projects/{id}/fork        fork_project

Every method issues at most one request. A transport failure is re-raised
as ``OperationFailedError`` naming the method; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from stackblitz_bff.graphql.adapters.base import (
    AdapterResult,
    BaseRestAdapter,
    ValidationError,
)
from stackblitz_bff.graphql.connection import local_id_of, to_connection
from stackblitz_bff.graphql.errors import (
    InvalidArgumentError,
    InvalidEntityError,
    InvalidIdentifierError,
    OperationFailedError,
)
from stackblitz_bff.graphql.global_id import PROJECT, USER, to_global_id
from stackblitz_bff.graphql.types import (
    Project,
    ProjectConnection,
    ProjectEdge,
    User,
    UserConnection,
    UserEdge,
)
from stackblitz_bff.logging import log_with_context

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("title", "files", "template")


# =============================================================================
# Normalization
# =============================================================================


def normalize_project(raw: Any) -> Project:
    """Map a REST project payload onto a Project.

    Optional fields the backend omits become None; a summary payload
    without ``files`` gets an empty mapping.

    Raises:
        InvalidEntityError: If the payload has no usable id
    """
    local_id = local_id_of(raw, kind=PROJECT)

    owner = raw.get("owner")
    owner_id = raw.get("ownerId")
    if owner_id is None and isinstance(owner, Mapping):
        owner_id = owner.get("id")

    return Project(
        id=_mint_id(PROJECT, local_id),
        title=raw.get("title") or "",
        description=raw.get("description"),
        files=dict(raw.get("files") or {}),
        template=raw.get("template"),
        dependencies=raw.get("dependencies"),
        settings=raw.get("settings"),
        tags=_unique_tags(raw.get("tags")),
        created_at=raw.get("createdAt"),
        updated_at=raw.get("updatedAt"),
        open_file=raw.get("openFile"),
        owner_payload=dict(owner) if isinstance(owner, Mapping) else None,
        owner_id=None if owner_id is None else str(owner_id),
    )


def normalize_user(raw: Any) -> User:
    """Map a REST user payload onto a User.

    Raises:
        InvalidEntityError: If the payload has no usable id
    """
    local_id = local_id_of(raw, kind=USER)

    return User(
        id=_mint_id(USER, local_id),
        username=raw.get("username") or "",
        display_name=raw.get("displayName"),
        url=raw.get("url"),
        avatar_url=raw.get("avatarUrl"),
    )


def _mint_id(kind: str, local_id: str) -> str:
    """Global id for a backend entity; an unusable backend id is a bad entity."""
    try:
        return to_global_id(kind, local_id)
    except InvalidArgumentError as e:
        raise InvalidEntityError(
            f"{kind} payload has an id that cannot be encoded: {local_id!r}", kind=kind
        ) from e


def _segment(local_id: str) -> str:
    """Quote a local id as a single URL path segment.

    Raises:
        InvalidIdentifierError: If the id is a dot segment
    """
    if local_id in (".", ".."):
        raise InvalidIdentifierError(f"Invalid local ID: {local_id!r}", token=local_id)
    return quote(local_id, safe="")


def _unique_tags(tags: Any) -> list[str] | None:
    """Tags form a set; keep first-seen order."""
    if tags is None:
        return None
    return list(dict.fromkeys(str(tag) for tag in tags))


def _list_params(
    filters: Mapping[str, Any] | None,
    pagination: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Build list query parameters: limit/cursor plus filters verbatim."""
    params: dict[str, Any] = {}
    if pagination:
        if pagination.get("first") is not None:
            params["limit"] = pagination["first"]
        if pagination.get("after") is not None:
            params["cursor"] = pagination["after"]
    if filters:
        params.update({k: v for k, v in filters.items() if v is not None})
    return params


def _body(input_data: Mapping[str, Any] | None) -> dict[str, Any]:
    if not input_data:
        return {}
    return {k: v for k, v in input_data.items() if v is not None}


# =============================================================================
# Adapter
# =============================================================================


class StackBlitzAdapter(BaseRestAdapter):
    """Adapter for the StackBlitz projects/users REST API."""

    @property
    def service_name(self) -> str:
        return "stackblitz"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def fetch_project(self, project_id: str) -> Project:
        """Fetch a single project by its local id."""
        result = await self._get(f"/projects/{_segment(project_id)}")
        payload = self._unwrap("fetch_project", result)
        return normalize_project(payload)

    async def fetch_projects(
        self,
        filters: Mapping[str, Any] | None = None,
        pagination: Mapping[str, Any] | None = None,
    ) -> ProjectConnection:
        """List projects, optionally filtered and paginated."""
        result = await self._get("/projects", params=_list_params(filters, pagination))
        return self._project_connection("fetch_projects", self._unwrap("fetch_projects", result))

    async def fetch_user(self, user_id: str) -> User:
        """Fetch a single user by its local id."""
        payload = self._unwrap("fetch_user", await self._get(f"/users/{_segment(user_id)}"))
        return normalize_user(payload)

    async def fetch_users(self, pagination: Mapping[str, Any] | None = None) -> UserConnection:
        """List users, paginated."""
        result = await self._get("/users", params=_list_params(None, pagination))
        return to_connection(
            self._unwrap("fetch_users", result),
            normalize_user,
            edge_type=UserEdge,
            connection_type=UserConnection,
            operation="fetch_users",
        )

    async def fetch_user_projects(
        self,
        user_id: str,
        filters: Mapping[str, Any] | None = None,
        pagination: Mapping[str, Any] | None = None,
    ) -> ProjectConnection:
        """List the projects of one user."""
        result = await self._get(
            f"/users/{_segment(user_id)}/projects", params=_list_params(filters, pagination)
        )
        return self._project_connection(
            "fetch_user_projects", self._unwrap("fetch_user_projects", result)
        )

    async def fetch_project_owner(self, project: Project) -> User:
        """Resolve a project's owner.

        Uses the owner embedded in the project payload when there is one,
        otherwise fetches the user by the owner id.

        Raises:
            InvalidEntityError: If the project carries neither
        """
        if project.owner_payload is not None:
            return normalize_user(project.owner_payload)
        if project.owner_id:
            return await self.fetch_user(project.owner_id)
        raise InvalidEntityError(f"Cannot resolve owner for project {project.id}", kind=PROJECT)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_project(self, input_data: Mapping[str, Any]) -> dict[str, Project]:
        """Create a project.

        Raises:
            ValidationError: If title, files or template is missing; no
                request is made
        """
        missing = [name for name in REQUIRED_CREATE_FIELDS if input_data.get(name) in (None, "")]
        if missing:
            log_with_context(
                logger,
                logging.INFO,
                f"[{self.service_name}] create_project rejected",
                missing_fields=missing,
            )
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                service_name=self.service_name,
                details={"fields": {name: ["This field is required"] for name in missing}},
            )

        result = await self._post("/projects", json=_body(input_data))
        return {"project": self._mutated_project("create_project", result)}

    async def update_project(
        self, project_id: str, input_data: Mapping[str, Any] | None
    ) -> dict[str, Project]:
        """Partially update a project.

        Raises:
            ValidationError: If the input has no field to change; no request
                is made
        """
        body = _body(input_data)
        if not body:
            logger.info(f"[{self.service_name}] update_project rejected, nothing to change")
            raise ValidationError(
                "Update requires at least one field to change",
                service_name=self.service_name,
            )

        result = await self._patch(f"/projects/{_segment(project_id)}", json=body)
        return {"project": self._mutated_project("update_project", result)}

    async def delete_project(self, project_id: str) -> dict[str, bool]:
        """Delete a project. Success means the backend reported no error."""
        self._unwrap("delete_project", await self._delete(f"/projects/{_segment(project_id)}"))
        return {"success": True}

    async def fork_project(
        self, project_id: str, input_data: Mapping[str, Any] | None = None
    ) -> dict[str, Project]:
        """Fork a project, applying optional overrides to the fork."""
        result = await self._post(
            f"/projects/{_segment(project_id)}/fork", json=_body(input_data)
        )
        return {"project": self._mutated_project("fork_project", result)}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _unwrap(self, operation: str, result: AdapterResult[Any]) -> Any:
        """Return the payload, or raise the failure tagged with the operation."""
        if result.is_error:
            raise OperationFailedError(operation, result.error) from result.error
        return result.data

    def _mutated_project(self, operation: str, result: AdapterResult[Any]) -> Project:
        """Normalize a mutation response.

        The backend may already have applied the change, so an unusable
        response is reported as a failure of the mutation itself.
        """
        payload = self._unwrap(operation, result)
        try:
            return normalize_project(payload)
        except InvalidEntityError as e:
            raise OperationFailedError(operation, e) from e

    @staticmethod
    def _project_connection(operation: str, payload: Any) -> ProjectConnection:
        return to_connection(
            payload,
            normalize_project,
            edge_type=ProjectEdge,
            connection_type=ProjectConnection,
            operation=operation,
        )


__all__ = ["StackBlitzAdapter", "normalize_project", "normalize_user"]
