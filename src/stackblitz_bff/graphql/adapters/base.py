"""
REST transport for the translation layer.

``BaseRestAdapter`` owns everything about talking HTTP to a backend: the
bearer credential, static headers, the per-request timeout, decoding JSON
and turning failure statuses into ``AdapterError`` subclasses. Concrete
adapters only describe endpoints.

Every call is exactly one request. Nothing here retries, backs off,
throttles or caches; a failure is returned to the caller as a failed
``AdapterResult``.

Example:
    class StackBlitzAdapter(BaseRestAdapter):
        @property
        def service_name(self) -> str:
            return "stackblitz"

        async def fetch_project(self, project_id: str) -> Project:
            result = await self._get(f"/projects/{project_id}")
            return normalize_project(result.unwrap())
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AdapterConfig:
    """Connection settings for one backend, fixed at adapter construction.

    Attributes:
        base_url: Root URL every request path is joined onto
        timeout: Seconds allowed per request
        api_key: Sent as ``Authorization: Bearer <key>`` when set
        headers: Extra headers sent with every request
    """

    base_url: str
    timeout: float = 30.0
    api_key: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass
class AdapterResponse(Generic[T]):
    """Decoded body and metadata of a successful HTTP exchange."""

    data: T
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    latency_ms: float = 0.0


# =============================================================================
# Transport Errors
# =============================================================================


class AdapterError(Exception):
    """Something went wrong between the adapter and the backend.

    ``service_name`` is filled in by the adapter that made the call, so the
    same exception classes serve any backend.
    """

    def __init__(
        self,
        message: str,
        *,
        service_name: str = "unknown",
        status_code: int | None = None,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.service_name = service_name
        self.status_code = status_code
        self.retry_after = retry_after
        self.details = details or {}

    def __str__(self) -> str:
        text = self.args[0]
        if self.status_code:
            text += f" (status: {self.status_code})"
        if self.service_name != "unknown":
            text += f" [{self.service_name}]"
        return text

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions for this error."""
        from stackblitz_bff.graphql.adapters.errors import normalize_error

        return normalize_error(self).to_graphql_extensions()


class ApiError(AdapterError):
    """The backend answered with a failure status, or could not be reached."""


class AuthenticationError(AdapterError):
    """The backend refused the credential (401) or the access (403)."""


class RateLimitError(AdapterError):
    """The backend answered 429. ``retry_after`` holds its hint, if any."""


class TimeoutError(AdapterError):
    """No answer within the configured timeout."""


class ValidationError(AdapterError):
    """Input rejected locally, before any request was sent."""


# status -> (error class, message used when the body has none)
_STATUS_ERRORS: dict[int, tuple[type[AdapterError], str]] = {
    401: (AuthenticationError, "Authentication required"),
    403: (AuthenticationError, "Access denied"),
    429: (RateLimitError, "Rate limit exceeded"),
}


# =============================================================================
# Result Type
# =============================================================================


@dataclass
class AdapterResult(Generic[T]):
    """Outcome of one adapter request: a payload or an ``AdapterError``.

    The transport never raises for backend failures; the concrete adapter
    decides how to surface them.

    Example:
        result = await adapter._get("/projects")
        if result.is_error:
            raise OperationFailedError("fetch_projects", result.error)
        payload = result.data
    """

    value: T | None = None
    failure_reason: AdapterError | None = None
    response: AdapterResponse[T] | None = None

    @classmethod
    def success(cls, data: T, response: AdapterResponse[T] | None = None) -> AdapterResult[T]:
        return cls(value=data, response=response)

    @classmethod
    def failure(cls, error: AdapterError) -> AdapterResult[T]:
        return cls(failure_reason=error)

    @property
    def is_error(self) -> bool:
        return self.failure_reason is not None

    @property
    def is_success(self) -> bool:
        return not self.is_error

    @property
    def data(self) -> T:
        """Payload of a successful request. ValueError on a failed one."""
        if self.is_error:
            raise ValueError("No data available - operation failed")
        return self.value  # type: ignore[return-value]

    @property
    def error(self) -> AdapterError:
        """Error of a failed request. ValueError on a successful one."""
        if self.failure_reason is None:
            raise ValueError("No error - operation succeeded")
        return self.failure_reason

    def unwrap(self) -> T:
        """Return the payload or raise the error."""
        if self.failure_reason is not None:
            raise self.failure_reason
        return self.data


# =============================================================================
# Base Adapter
# =============================================================================


class BaseRestAdapter(ABC):
    """HTTP plumbing shared by concrete REST adapters.

    Subclasses name their service and call ``_get``, ``_post``, ``_patch``
    and ``_delete`` with paths relative to ``config.base_url``.
    """

    def __init__(self, config: AdapterConfig, *, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the adapter.

        Args:
            config: Connection settings
            client: Shared HTTP client. Without one, a client is opened and
                closed around each request.
        """
        self.config = config
        self._client = client

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Backend name used in logs and error codes."""
        ...

    async def _get(self, path: str, *, params: dict[str, Any] | None = None) -> AdapterResult[Any]:
        return await self._request("GET", path, params=params)

    async def _post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> AdapterResult[Any]:
        return await self._request("POST", path, json=json, params=params)

    async def _patch(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> AdapterResult[Any]:
        return await self._request("PATCH", path, json=json, params=params)

    async def _delete(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> AdapterResult[Any]:
        return await self._request("DELETE", path, params=params)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> AdapterResult[Any]:
        """Send one request and wrap the outcome.

        Args:
            method: HTTP method
            path: Endpoint path, joined onto ``config.base_url``
            json: JSON body
            params: Query parameters

        Returns:
            Successful result with the decoded body, or a failed result
            carrying the AdapterError, tagged with this service's name
        """
        url = f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
        started = time.monotonic()

        try:
            response = await self._make_http_request(
                method=method,
                url=url,
                json_body=json,
                params=params,
                headers=self._build_headers(),
            )
        except AdapterError as e:
            e.service_name = self.service_name
            logger.error(f"[{self.service_name}] {method} {path} failed: {e}")
            return AdapterResult.failure(e)

        response.latency_ms = (time.monotonic() - started) * 1000
        logger.debug(
            f"[{self.service_name}] {method} {path} -> {response.status_code} "
            f"({response.latency_ms:.1f}ms)"
        )
        return AdapterResult.success(response.data, response=response)

    def _build_headers(self) -> dict[str, str]:
        """Headers for one request. Always a new dict."""
        headers = dict(self.config.headers)
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def _make_http_request(
        self,
        method: str,
        url: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> AdapterResponse[Any]:
        """Perform the HTTP exchange with httpx.

        Raises:
            TimeoutError: If the backend does not answer in time
            ApiError: If the connection fails or the status is an error
            AuthenticationError: On 401 or 403
            RateLimitError: On 429
        """
        request_kwargs: dict[str, Any] = {
            "json": json_body,
            "params": params,
            "headers": headers,
            "timeout": self.config.timeout,
        }
        try:
            if self._client is not None:
                response = await self._client.request(method, url, **request_kwargs)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(method, url, **request_kwargs)
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Request timed out after {self.config.timeout}s",
                service_name=self.service_name,
            ) from e
        except httpx.RequestError as e:
            raise ApiError(f"Request failed: {e}", service_name=self.service_name) from e

        return self._process_response(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    def _process_response(
        self,
        *,
        status_code: int,
        headers: dict[str, str],
        body: bytes,
    ) -> AdapterResponse[Any]:
        """Decode a response body, raising for failure statuses.

        An empty body decodes to ``{}`` and a non-JSON or undecodable body
        to ``{"raw": <text>}``. Error details are the decoded body when it is
        an object, otherwise ``{"body": <decoded>}``.
        """
        data = _decode_body(body)
        if status_code < 400:
            return AdapterResponse(data=data, status_code=status_code, headers=headers)

        details = data if isinstance(data, dict) else {"body": data}
        error_class, fallback = _STATUS_ERRORS.get(
            status_code, (ApiError, f"API error: {status_code}")
        )
        raise error_class(
            details.get("message") or fallback,
            status_code=status_code,
            retry_after=_retry_after(headers) if error_class is RateLimitError else None,
            details=details,
        )


def _decode_body(body: bytes) -> Any:
    if not body:
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {"raw": body.decode(errors="replace")}


def _retry_after(headers: Mapping[str, str]) -> float | None:
    """Seconds from a numeric Retry-After header, matched case-insensitively."""
    for name, value in headers.items():
        if name.lower() == "retry-after":
            try:
                return float(value)
            except ValueError:
                return None
    return None


__all__ = [
    "AdapterConfig",
    "AdapterError",
    "AdapterResponse",
    "AdapterResult",
    "ApiError",
    "AuthenticationError",
    "BaseRestAdapter",
    "RateLimitError",
    "TimeoutError",
    "ValidationError",
]
