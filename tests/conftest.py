"""Pytest configuration for edon-modules tests."""

from collections.abc import Callable

import httpx
import pytest
from edon_modules.settings import LoaderSettings

REGISTRY_URL = "https://registry.test"


@pytest.fixture
def settings(tmp_path):
    """LoaderSettings rooted in a temporary home directory."""
    return LoaderSettings(home=tmp_path / "edon-home", registry_url=REGISTRY_URL, request_timeout=5.0)


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests go to a handler instead of the network."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
