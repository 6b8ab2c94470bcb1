"""
Error taxonomy for the GraphQL translation layer.

These errors describe failures of the translation itself (identifiers,
payload shapes, wrapped transport failures). Transport errors raised while
talking to the REST backend live in ``stackblitz_bff.graphql.adapters.base``.

Every error exposes an ``extensions`` mapping, which graphql-core copies
onto the GraphQL error returned to clients.
"""

from __future__ import annotations

from typing import Any


class TranslationError(Exception):
    """Base exception for translation layer errors."""

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions for this error."""
        from stackblitz_bff.graphql.adapters.errors import normalize_error

        return normalize_error(self).to_graphql_extensions()


class InvalidArgumentError(TranslationError, ValueError):
    """A global identifier could not be minted from the given parts."""

    pass


class InvalidIdentifierError(TranslationError, ValueError):
    """A global identifier is malformed, ambiguous or of the wrong kind."""

    def __init__(self, message: str, *, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


class MalformedResponseError(TranslationError):
    """The REST backend returned a payload without the expected shape."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class InvalidEntityError(TranslationError):
    """An entity payload cannot be normalized (e.g. it has no identifier)."""

    def __init__(self, message: str, *, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


class OperationFailedError(TranslationError):
    """A transport failure, tagged with the adapter operation that hit it.

    The original exception is available as ``cause`` (and as ``__cause__``
    when raised with ``raise ... from``).
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


__all__ = [
    "InvalidArgumentError",
    "InvalidEntityError",
    "InvalidIdentifierError",
    "MalformedResponseError",
    "OperationFailedError",
    "TranslationError",
]
