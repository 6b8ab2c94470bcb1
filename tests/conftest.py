"""Shared pytest fixtures for StackBlitz BFF tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from stackblitz_bff.config import get_settings
from stackblitz_bff.graphql.adapters.base import AdapterConfig, AdapterResponse
from stackblitz_bff.graphql.adapters.stackblitz import StackBlitzAdapter
from stackblitz_bff.logging import ROOT_LOGGER


@pytest.fixture
def adapter_config() -> AdapterConfig:
    """Return an adapter config pointing at a fake backend."""
    return AdapterConfig(base_url="https://api.stackblitz.test", api_key="test-key")


@pytest.fixture
def adapter(adapter_config: AdapterConfig) -> StackBlitzAdapter:
    """Return a StackBlitz adapter with no network access configured."""
    return StackBlitzAdapter(adapter_config)


@pytest.fixture
def respond(adapter: StackBlitzAdapter) -> Callable[..., AsyncMock]:
    """Replace the adapter's HTTP call with an AsyncMock.

    ``respond(data)`` answers every request with ``data``;
    ``respond(side_effect=...)`` raises or answers per call.
    """

    def _respond(data: Any = None, *, side_effect: Any = None) -> AsyncMock:
        mock = AsyncMock(return_value=AdapterResponse(data=data), side_effect=side_effect)
        adapter._make_http_request = mock  # type: ignore[method-assign]
        return mock

    return _respond


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Any:
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers and level set by setup_logging during a test."""
    yield
    package_logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
