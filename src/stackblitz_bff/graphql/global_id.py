"""
Global object identification.

A global id is ``base64("<kind>:<local id>")`` using standard base64 with
padding over UTF-8. Two implementations agreeing on this format produce
identical tokens for identical ``(kind, local id)`` pairs.

Example:
    >>> to_global_id("Project", "p1")
    'UHJvamVjdDpwMQ=='
    >>> from_global_id("UHJvamVjdDpwMQ==")
    GlobalIdParts(kind='Project', local_id='p1')
"""

from __future__ import annotations

import base64
import binascii
from typing import NamedTuple

from stackblitz_bff.graphql.errors import InvalidArgumentError, InvalidIdentifierError

SEPARATOR = ":"

PROJECT = "Project"
USER = "User"


class GlobalIdParts(NamedTuple):
    """Decoded global id."""

    kind: str
    local_id: str


def to_global_id(kind: str, local_id: str) -> str:
    """Mint the global id for an entity.

    Args:
        kind: Entity kind (``Project``, ``User``)
        local_id: Backend-native identifier

    Returns:
        Opaque global id token

    Raises:
        InvalidArgumentError: If a part is empty or contains the separator
    """
    for name, value in (("kind", kind), ("local id", local_id)):
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError(f"Global id {name} must be a non-empty string")
        if SEPARATOR in value:
            raise InvalidArgumentError(
                f"Global id {name} must not contain {SEPARATOR!r}: {value!r}"
            )

    payload = f"{kind}{SEPARATOR}{local_id}".encode()
    return base64.b64encode(payload).decode("ascii")


def from_global_id(token: str) -> GlobalIdParts:
    """Decode a global id into its kind and local id.

    Only canonical tokens (as produced by ``to_global_id``) are accepted.

    Raises:
        InvalidIdentifierError: If the token is malformed or ambiguous
    """
    if not isinstance(token, str) or not token:
        raise InvalidIdentifierError("Invalid global ID: empty token", token=token)

    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
        payload = raw.decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise InvalidIdentifierError(f"Invalid global ID: {token}", token=token) from e

    # Reject alternate spellings of the same bytes (missing padding, etc.)
    if base64.b64encode(raw).decode("ascii") != token:
        raise InvalidIdentifierError(f"Invalid global ID: {token}", token=token)

    if payload.count(SEPARATOR) != 1:
        raise InvalidIdentifierError(f"Invalid global ID format: {token}", token=token)

    kind, local_id = payload.split(SEPARATOR, 1)
    if not kind or not local_id:
        raise InvalidIdentifierError(f"Invalid global ID format: {token}", token=token)

    return GlobalIdParts(kind, local_id)


def decode_local_id(token: str, kind: str) -> str:
    """Decode a global id that must refer to ``kind`` and return its local id."""
    parts = from_global_id(token)
    if parts.kind != kind:
        raise InvalidIdentifierError(
            f"Expected a {kind} ID, got a {parts.kind} ID: {token}", token=token
        )
    return parts.local_id


__all__ = [
    "PROJECT",
    "SEPARATOR",
    "USER",
    "GlobalIdParts",
    "decode_local_id",
    "from_global_id",
    "to_global_id",
]
