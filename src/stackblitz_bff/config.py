"""
Centralized configuration for the StackBlitz BFF.

Single source of truth for the REST backend location, credential and
timeout, plus the settings of the HTTP server that exposes GraphQL.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cache

from stackblitz_bff.graphql.adapters.base import AdapterConfig

DEFAULT_API_URL = "https://api.stackblitz.com"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Settings from environment variables.

    Attributes:
        api_url: Base URL of the StackBlitz REST API
        api_key: Bearer credential (optional)
        timeout: Per-request timeout in seconds
        headers: Static headers sent with every request
        host: Interface the GraphQL server binds to
        port: Port the GraphQL server listens on
        graphiql: Serve the GraphiQL IDE
        log_level: Minimum log level name
        log_json: Log JSON lines instead of readable text
    """

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    timeout: float = 30.0
    headers: Mapping[str, str] = field(default_factory=dict)
    host: str = "127.0.0.1"
    port: int = 8000
    graphiql: bool = True
    log_level: str = "INFO"
    log_json: bool = False

    def to_adapter_config(self) -> AdapterConfig:
        """Build the adapter configuration."""
        return AdapterConfig(
            base_url=self.api_url,
            timeout=self.timeout,
            api_key=self.api_key,
            headers=dict(self.headers),
        )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from an environment mapping.

    Environment variables:
        - STACKBLITZ_API_URL → api_url
        - STACKBLITZ_API_KEY → api_key
        - STACKBLITZ_TIMEOUT → timeout (seconds, > 0)
        - STACKBLITZ_HEADERS → headers (JSON object of strings)
        - STACKBLITZ_BFF_HOST / STACKBLITZ_BFF_PORT → host / port
        - STACKBLITZ_BFF_GRAPHIQL → graphiql (true/false)
        - STACKBLITZ_BFF_LOG_LEVEL → log_level
        - STACKBLITZ_BFF_LOG_JSON → log_json (true/false)

    Args:
        environ: Mapping to read (default: ``os.environ``)

    Raises:
        ValueError: If a variable holds an invalid value; the message names it
    """
    env = os.environ if environ is None else environ

    return Settings(
        api_url=env.get("STACKBLITZ_API_URL") or DEFAULT_API_URL,
        api_key=env.get("STACKBLITZ_API_KEY") or None,
        timeout=_positive_float(env, "STACKBLITZ_TIMEOUT", 30.0),
        headers=_headers(env, "STACKBLITZ_HEADERS"),
        host=env.get("STACKBLITZ_BFF_HOST") or "127.0.0.1",
        port=_port(env, "STACKBLITZ_BFF_PORT", 8000),
        graphiql=_flag(env, "STACKBLITZ_BFF_GRAPHIQL", True),
        log_level=(env.get("STACKBLITZ_BFF_LOG_LEVEL") or "INFO").upper(),
        log_json=_flag(env, "STACKBLITZ_BFF_LOG_JSON", False),
    )


@cache
def get_settings() -> Settings:
    """Load settings from ``os.environ`` once per process.

    Returns:
        Settings with validated values.
    """
    return load_settings()


# =============================================================================
# Parsers
# =============================================================================


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be greater than 0, got {raw!r}")
    return value


def _port(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if not 0 < value < 65536:
        raise ValueError(f"{name} must be between 1 and 65535, got {raw!r}")
    return value


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if not raw:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be true or false, got {raw!r}")


def _headers(env: Mapping[str, str], name: str) -> dict[str, str]:
    raw = env.get(name)
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        raise ValueError(f"{name} must be a JSON object") from None
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a JSON object")
    return {str(k): str(v) for k, v in value.items()}


__all__ = ["DEFAULT_API_URL", "Settings", "get_settings", "load_settings"]
