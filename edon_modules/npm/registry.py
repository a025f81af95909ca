"""Client for the npm registry's per-version metadata endpoint."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..errors import PackageInstallError
from ..errors import PackageNotFoundError
from ..settings import DEFAULT_REGISTRY_URL
from ..settings import DEFAULT_REQUEST_TIMEOUT
from .metadata import PackageMetadata

logger = logging.getLogger(__name__)


class NpmRegistryClient:
    """Fetches version metadata from an npm-compatible registry.

    Discovery only: writing packages to disk is the package manager's job.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize registry client.

        Args:
            client: Shared async HTTP client (owned by the caller)
            registry_url: Registry base URL
            timeout: Seconds allowed per request
        """
        self.client = client
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout

    def metadata_url(self, name: str, version: str) -> str:
        """Build ``<registry>/<name>/<version>``; scoped names become ``@scope%2Fname``."""
        return f"{self.registry_url}/{quote(name, safe='@')}/{quote(version, safe='')}"

    async def fetch_metadata(self, name: str, version: str = "latest") -> PackageMetadata:
        """Fetch metadata for one package version.

        Raises:
            PackageNotFoundError: Registry answered with anything but 200
            PackageInstallError: Transport failure or unparseable body
        """
        url = self.metadata_url(name, version)
        logger.info(f"Fetching package metadata from {url}")

        try:
            response = await self.client.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            raise PackageInstallError(f"Failed to reach registry for {name}@{version}: {e}") from e

        if response.status_code != 200:
            raise PackageNotFoundError(f"Package {name}@{version} not found (HTTP {response.status_code})")

        try:
            return PackageMetadata.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PackageInstallError(f"Invalid registry metadata for {name}@{version}: {e}") from e

    def __repr__(self) -> str:
        return f"NpmRegistryClient({self.registry_url})"
