"""Tests for connection pagination."""

from __future__ import annotations

from typing import Any

import pytest

from stackblitz_bff.graphql.adapters.stackblitz import normalize_project, normalize_user
from stackblitz_bff.graphql.connection import (
    build_page_info,
    local_id_of,
    to_connection,
)
from stackblitz_bff.graphql.errors import InvalidEntityError, MalformedResponseError
from stackblitz_bff.graphql.global_id import to_global_id
from stackblitz_bff.graphql.types import (
    PageInfo,
    ProjectConnection,
    ProjectEdge,
    UserConnection,
    UserEdge,
)


def _projects(payload: Any) -> ProjectConnection:
    return to_connection(
        payload,
        normalize_project,
        edge_type=ProjectEdge,
        connection_type=ProjectConnection,
        operation="fetch_projects",
    )


class TestLocalIdOf:
    """Tests for local_id_of."""

    def test_string_id(self) -> None:
        assert local_id_of({"id": "p1"}) == "p1"

    def test_numeric_id_is_stringified(self) -> None:
        assert local_id_of({"id": 42}) == "42"

    @pytest.mark.parametrize("raw", [{}, {"id": None}, {"id": ""}, "p1", None])
    def test_rejects_missing_id(self, raw: Any) -> None:
        with pytest.raises(InvalidEntityError):
            local_id_of(raw, kind="Project")


class TestBuildPageInfo:
    """Tests for build_page_info."""

    def test_copies_fields(self) -> None:
        """Test hasNextPage and endCursor are copied."""
        info = build_page_info({"hasNextPage": True, "endCursor": "abc"})
        assert info == PageInfo(has_next_page=True, end_cursor="abc")

    def test_missing_end_cursor(self) -> None:
        """Test a missing endCursor becomes None."""
        assert build_page_info({"hasNextPage": False}).end_cursor is None

    def test_null_end_cursor(self) -> None:
        """Test a null endCursor becomes None."""
        assert build_page_info({"hasNextPage": False, "endCursor": None}).end_cursor is None

    def test_empty_end_cursor_kept(self) -> None:
        """Test an empty string cursor is passed through, not dropped."""
        assert build_page_info({"endCursor": ""}).end_cursor == ""

    def test_missing_has_next_page(self) -> None:
        """Test a missing hasNextPage means no next page."""
        assert build_page_info({}).has_next_page is False

    @pytest.mark.parametrize("value", ["false", "true", 0, 1])
    def test_non_boolean_has_next_page(self, value: Any) -> None:
        """Test a non-boolean hasNextPage is rejected rather than coerced."""
        with pytest.raises(MalformedResponseError) as exc:
            build_page_info({"hasNextPage": value}, operation="fetch_projects")
        assert exc.value.operation == "fetch_projects"

    def test_non_boolean_has_next_page_in_list(self) -> None:
        with pytest.raises(MalformedResponseError):
            _projects({"items": [], "hasNextPage": "false"})


class TestToConnection:
    """Tests for to_connection."""

    def test_edges_preserve_order_and_count(self) -> None:
        """Test one edge per item, in backend order."""
        payload = {
            "items": [
                {"id": "p3", "title": "Third"},
                {"id": "p1", "title": "First"},
                {"id": "p2", "title": "Second"},
            ],
            "hasNextPage": True,
            "endCursor": "p2",
        }
        connection = _projects(payload)

        assert [edge.cursor for edge in connection.edges] == ["p3", "p1", "p2"]
        assert [edge.node.title for edge in connection.edges] == ["Third", "First", "Second"]
        assert connection.page_info.has_next_page is True
        assert connection.page_info.end_cursor == "p2"

    def test_cursor_is_local_id_node_id_is_global(self) -> None:
        """Test edge cursors are backend ids while nodes carry global ids."""
        connection = _projects({"items": [{"id": "p1", "title": "T"}]})
        edge = connection.edges[0]
        assert edge.cursor == "p1"
        assert edge.node.id == to_global_id("Project", "p1")

    def test_empty_items(self) -> None:
        """Test an empty page."""
        connection = _projects({"items": [], "hasNextPage": False})
        assert connection.edges == []
        assert connection.page_info == PageInfo(has_next_page=False, end_cursor=None)

    def test_user_connection(self) -> None:
        """Test the same transformer builds user connections."""
        connection = to_connection(
            {"items": [{"id": "u1", "username": "ada"}], "hasNextPage": False},
            normalize_user,
            edge_type=UserEdge,
            connection_type=UserConnection,
        )
        assert isinstance(connection, UserConnection)
        assert connection.edges[0].node.username == "ada"
        assert connection.edges[0].cursor == "u1"

    def test_missing_items(self) -> None:
        """Test a response without items is malformed."""
        with pytest.raises(MalformedResponseError) as exc:
            _projects({"hasNextPage": False})
        assert exc.value.operation == "fetch_projects"

    def test_items_not_a_list(self) -> None:
        """Test a response whose items is not a list is malformed."""
        with pytest.raises(MalformedResponseError):
            _projects({"items": {"id": "p1"}})

    def test_payload_not_an_object(self) -> None:
        """Test a non-object response is malformed."""
        with pytest.raises(MalformedResponseError):
            _projects([{"id": "p1"}])

    def test_item_without_id(self) -> None:
        """Test an item without id fails the whole page."""
        with pytest.raises(InvalidEntityError):
            _projects({"items": [{"id": "p1"}, {"title": "no id"}]})
