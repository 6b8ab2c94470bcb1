"""
Node resolution.

Resolves a global id to a concrete entity without knowing its kind in
advance, and classifies already-resolved values for the ``Node`` interface.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stackblitz_bff.graphql.global_id import PROJECT, USER, from_global_id

if TYPE_CHECKING:
    from stackblitz_bff.graphql.adapters.stackblitz import StackBlitzAdapter
    from stackblitz_bff.graphql.types import Project, User

logger = logging.getLogger(__name__)


async def resolve_node(adapter: StackBlitzAdapter, global_id: str) -> Project | User | None:
    """Fetch the entity a global id refers to.

    Args:
        adapter: Adapter used for the single-entity fetch
        global_id: Opaque global id

    Returns:
        The Project or User, or None when the id is well-formed but names
        a kind this layer does not serve

    Raises:
        InvalidIdentifierError: If the id cannot be decoded
        OperationFailedError: If the backend call fails
    """
    kind, local_id = from_global_id(global_id)

    if kind == PROJECT:
        return await adapter.fetch_project(local_id)
    if kind == USER:
        return await adapter.fetch_user(local_id)

    logger.debug(f"No node resolver for kind {kind!r} (id {global_id})")
    return None


def resolve_node_type(value: Any) -> str | None:
    """Classify a value as a Project or a User by the fields it carries.

    Mappings are checked by key, other objects by attribute. A value with
    ``files`` is a Project, one with ``username`` is a User; anything else
    has no concrete type.
    """
    if isinstance(value, Mapping):

        def has(name: str) -> bool:
            return name in value

    else:

        def has(name: str) -> bool:
            return hasattr(value, name)

    if has("files"):
        return PROJECT
    if has("username"):
        return USER
    return None


__all__ = ["resolve_node", "resolve_node_type"]
