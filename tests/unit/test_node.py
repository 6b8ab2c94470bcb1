"""Tests for node resolution."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from stackblitz_bff.graphql.adapters.base import ApiError
from stackblitz_bff.graphql.adapters.stackblitz import StackBlitzAdapter, normalize_user
from stackblitz_bff.graphql.errors import InvalidIdentifierError, OperationFailedError
from stackblitz_bff.graphql.global_id import to_global_id
from stackblitz_bff.graphql.node import resolve_node, resolve_node_type
from stackblitz_bff.graphql.types import Project, User

Respond = Callable[..., AsyncMock]


class TestResolveNode:
    """Tests for resolve_node."""

    async def test_project(self, adapter: StackBlitzAdapter, respond: Respond) -> None:
        """Test a Project id fetches the project by its local id."""
        mock = respond({"id": "p1", "title": "T"})

        node = await resolve_node(adapter, to_global_id("Project", "p1"))

        assert isinstance(node, Project)
        assert node.title == "T"
        assert node.id == to_global_id("Project", "p1")
        assert mock.call_args.kwargs["url"].endswith("/projects/p1")

    async def test_user(self, adapter: StackBlitzAdapter, respond: Respond) -> None:
        """Test a User id fetches the user by its local id."""
        mock = respond({"id": "u1", "username": "ada"})

        node = await resolve_node(adapter, to_global_id("User", "u1"))

        assert isinstance(node, User)
        assert node.username == "ada"
        assert mock.call_args.kwargs["url"].endswith("/users/u1")

    async def test_unknown_kind_is_none(self, adapter: StackBlitzAdapter, respond: Respond) -> None:
        """Test an unknown kind yields None without a request."""
        mock = respond()

        assert await resolve_node(adapter, to_global_id("Widget", "x")) is None
        mock.assert_not_awaited()

    async def test_malformed_id(self, adapter: StackBlitzAdapter, respond: Respond) -> None:
        """Test decode errors propagate and no request is made."""
        mock = respond()

        with pytest.raises(InvalidIdentifierError):
            await resolve_node(adapter, "not-a-global-id")
        mock.assert_not_awaited()

    async def test_backend_failure_propagates(
        self, adapter: StackBlitzAdapter, respond: Respond
    ) -> None:
        """Test fetch failures are not downgraded to None."""
        respond(side_effect=ApiError("Not found", status_code=404))

        with pytest.raises(OperationFailedError):
            await resolve_node(adapter, to_global_id("Project", "gone"))


class TestResolveNodeType:
    """Tests for resolve_node_type."""

    def test_mapping_with_files(self) -> None:
        assert resolve_node_type({"id": "p1", "files": {}}) == "Project"

    def test_mapping_with_username(self) -> None:
        assert resolve_node_type({"id": "u1", "username": "ada"}) == "User"

    def test_mapping_with_neither(self) -> None:
        assert resolve_node_type({"id": "x", "title": "T"}) is None

    def test_files_wins_over_username(self) -> None:
        assert resolve_node_type({"files": {}, "username": "ada"}) == "Project"

    def test_object_attributes(self) -> None:
        assert resolve_node_type(SimpleNamespace(files={})) == "Project"
        assert resolve_node_type(SimpleNamespace(username="ada")) == "User"
        assert resolve_node_type(SimpleNamespace(title="T")) is None

    def test_typed_instances(self) -> None:
        assert resolve_node_type(Project(id="UHJvamVjdDpwMQ==", title="T")) == "Project"
        assert resolve_node_type(normalize_user({"id": "u1", "username": "ada"})) == "User"

    def test_none(self) -> None:
        assert resolve_node_type(None) is None


class TestIsTypeOf:
    """Tests for the is_type_of hooks on Project and User."""

    def test_project_accepts_untyped_payload(self) -> None:
        assert Project.is_type_of({"files": {}}, None)
        assert not Project.is_type_of({"username": "ada"}, None)

    def test_user_accepts_untyped_payload(self) -> None:
        assert User.is_type_of({"username": "ada"}, None)
        assert not User.is_type_of({"files": {}}, None)

    def test_instances(self) -> None:
        user = normalize_user({"id": "u1", "username": "ada"})
        assert User.is_type_of(user, None)
        assert not Project.is_type_of(user, None)
