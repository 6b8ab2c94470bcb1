"""
Connection pagination.

Turns a REST list response::

    {"items": [...], "hasNextPage": true, "endCursor": "abc"}

into a connection of edges plus page info. Each edge cursor is the item's
backend-local id, so an ``after`` cursor can be handed straight back to the
backend's own ``cursor`` parameter on the next call.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from stackblitz_bff.graphql.errors import InvalidEntityError, MalformedResponseError
from stackblitz_bff.graphql.types import PageInfo

NodeT = TypeVar("NodeT")
EdgeT = TypeVar("EdgeT")
ConnectionT = TypeVar("ConnectionT")


def local_id_of(raw: Any, *, kind: str | None = None) -> str:
    """Return the backend-local id of a raw entity.

    Raises:
        InvalidEntityError: If the payload is not an object or has no id
    """
    label = kind or "Entity"
    if not isinstance(raw, Mapping):
        raise InvalidEntityError(f"{label} payload is not an object", kind=kind)
    local_id = raw.get("id")
    if local_id is None or local_id == "":
        raise InvalidEntityError(f"{label} payload has no id", kind=kind)
    return str(local_id)


def build_page_info(payload: Mapping[str, Any], *, operation: str | None = None) -> PageInfo:
    """Copy page info from the backend response.

    A missing or null ``hasNextPage`` means no next page, and a missing or
    null ``endCursor`` becomes None; any string the backend sends is kept
    as is.

    Raises:
        MalformedResponseError: If ``hasNextPage`` is present but not a boolean
    """
    has_next_page = payload.get("hasNextPage")
    if has_next_page is None:
        has_next_page = False
    elif not isinstance(has_next_page, bool):
        raise MalformedResponseError(
            f"List response has non-boolean 'hasNextPage': {has_next_page!r}",
            operation=operation,
        )

    end_cursor = payload.get("endCursor")
    return PageInfo(
        has_next_page=has_next_page,
        end_cursor=None if end_cursor is None else str(end_cursor),
    )


def build_edges(
    items: list[Any],
    normalize: Callable[[Any], NodeT],
    edge_type: Callable[..., EdgeT],
) -> list[EdgeT]:
    """Normalize items into edges, preserving backend order."""
    return [edge_type(cursor=local_id_of(item), node=normalize(item)) for item in items]


def to_connection(
    payload: Any,
    normalize: Callable[[Any], NodeT],
    *,
    edge_type: Callable[..., EdgeT],
    connection_type: Callable[..., ConnectionT],
    operation: str | None = None,
) -> ConnectionT:
    """Build a connection from a REST list response.

    Args:
        payload: Decoded list response
        normalize: Maps one raw item to its entity type
        edge_type: Edge class (e.g. ``ProjectEdge``)
        connection_type: Connection class (e.g. ``ProjectConnection``)
        operation: Adapter operation name, for error reporting

    Returns:
        Connection with one edge per item

    Raises:
        MalformedResponseError: If ``items`` is missing or not a list
        InvalidEntityError: If an item has no id
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponseError("List response is not an object", operation=operation)

    items = payload.get("items")
    if not isinstance(items, list):
        raise MalformedResponseError(
            "List response has no 'items' list", operation=operation
        )

    return connection_type(
        edges=build_edges(items, normalize, edge_type),
        page_info=build_page_info(payload, operation=operation),
    )


__all__ = ["build_edges", "build_page_info", "local_id_of", "to_connection"]
