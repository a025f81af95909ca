"""HTTP(S) CDN resolver."""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..errors import ModuleNotFoundError
from ..models import Module
from ..models import Scheme
from ..settings import DEFAULT_REQUEST_TIMEOUT
from .base import ModuleResolver

logger = logging.getLogger(__name__)


class CdnResolver(ModuleResolver):
    """Fetches module source with a single GET.

    The timeout bounds the whole request (connect, headers and body), so a
    slow or stalled endpoint cannot hang the load pipeline.
    """

    scheme = Scheme.CDN

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """Initialize resolver.

        Args:
            client: Shared async HTTP client (owned by the caller)
            timeout: Total seconds allowed per request
        """
        self.client = client
        self.timeout = timeout

    async def resolve(self, specifier: str) -> Module:
        logger.info(f"Fetching CDN module: {specifier}")
        try:
            async with asyncio.timeout(self.timeout):
                content = await self._fetch(specifier)
        except TimeoutError as e:
            raise ModuleNotFoundError(f"Timed out after {self.timeout}s fetching {specifier}", specifier) from e
        except httpx.HTTPError as e:
            raise ModuleNotFoundError(f"Failed to fetch {specifier}: {e}", specifier) from e

        return Module(specifier=specifier, content=content, scheme=Scheme.CDN)

    async def _fetch(self, url: str) -> str:
        async with self.client.stream("GET", url, timeout=self.timeout, follow_redirects=True) as response:
            # Drain the body either way so the connection returns to the pool
            await response.aread()
            if not response.is_success:
                raise ModuleNotFoundError(f"Module not found at {url} (HTTP {response.status_code})", url)
            return response.text

    def __repr__(self) -> str:
        return f"CdnResolver(timeout={self.timeout}s)"
