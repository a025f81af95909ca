"""Module loader: classify, consult the cache, dispatch, store.

The loader is the single entry point the evaluator uses. It owns the content
cache, the single-flight group and (unless one is injected) the HTTP client
shared by the CDN resolver and the npm registry client.

Example:
    async with ModuleLoader() as loader:
        source = await loader.load_source("npm:left-pad@1.3.0")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import TracebackType

import httpx

from .cache import ContentCache
from .errors import InvalidSpecifierError
from .errors import ModuleLoadError
from .errors import ModuleNotFoundError
from .errors import UnsupportedModuleKindError
from .models import ClassificationResult
from .models import Module
from .models import Scheme
from .npm.package_manager import NpmPackageManager
from .npm.registry import NpmRegistryClient
from .resolvers import CdnResolver
from .resolvers import JsrResolver
from .resolvers import LocalResolver
from .resolvers import ModuleResolver
from .resolvers import NpmResolver
from .settings import LoaderSettings
from .singleflight import SingleFlight
from .specifier import classify

logger = logging.getLogger(__name__)


class ModuleLoader:
    """Loads each distinct specifier once per loader and caches the result."""

    def __init__(
        self,
        settings: LoaderSettings | None = None,
        *,
        cache: ContentCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        package_manager: NpmPackageManager | None = None,
        resolvers: Mapping[Scheme, ModuleResolver] | None = None,
    ):
        """Initialize loader.

        Args:
            settings: Loader settings (default: LoaderSettings())
            cache: Content cache (default: a fresh ContentCache)
            http_client: Shared HTTP client; an injected client is not closed by aclose()
            package_manager: npm package manager (default: built from settings)
            resolvers: Full scheme -> resolver mapping, replacing the defaults
        """
        self.settings = settings or LoaderSettings()
        self.cache = cache if cache is not None else ContentCache()
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=self.settings.request_timeout)
        self._flights: SingleFlight[Module] = SingleFlight()

        self.package_manager = package_manager or NpmPackageManager(
            registry=NpmRegistryClient(
                self.http_client,
                registry_url=self.settings.registry_url,
                timeout=self.settings.request_timeout,
            ),
            cache_dir=self.settings.npm_cache_dir,
            entry_file=self.settings.entry_file,
        )
        if resolvers is not None:
            self.resolvers: dict[Scheme, ModuleResolver] = dict(resolvers)
            return

        self.resolvers = {
            Scheme.LOCAL: LocalResolver(),
            Scheme.CDN: CdnResolver(self.http_client, timeout=self.settings.request_timeout),
            Scheme.NPM: NpmResolver(self.package_manager),
            Scheme.JSR: JsrResolver(),
        }

    def register_resolver(self, scheme: Scheme, resolver: ModuleResolver) -> None:
        """Add or replace the resolver for a scheme."""
        logger.debug(f"Registering resolver for {scheme.value}: {resolver!r}")
        self.resolvers[scheme] = resolver

    async def load(self, specifier: str, *, timeout: float | None = None) -> Module:
        """Load a module, from cache when possible.

        Args:
            specifier: Module specifier (path, URL, npm:..., jsr:...)
            timeout: Optional overall deadline in seconds for this call

        Returns:
            The cached Module for ``specifier``

        Raises:
            ModuleLoadError: Tagged failure; nothing is cached on failure. An
                elapsed ``timeout`` is a ModuleNotFoundError.
        """
        classification = classify(specifier)
        if not classification.valid:
            raise InvalidSpecifierError(classification.error or f"Invalid specifier: {specifier}", specifier)

        if (cached := self.cache.get(specifier)) is not None:
            logger.debug(f"Module cache hit: {specifier}")
            return cached

        if timeout is None:
            return await self._flights.do(specifier, lambda: self._resolve_and_store(specifier, classification))
        try:
            async with asyncio.timeout(timeout):
                return await self._flights.do(specifier, lambda: self._resolve_and_store(specifier, classification))
        except TimeoutError as e:
            raise ModuleNotFoundError(f"Timed out after {timeout}s loading {specifier}", specifier) from e

    async def load_source(self, specifier: str) -> str:
        """Load a module and return only its source text (evaluator interface)."""
        module = await self.load(specifier)
        return module.content

    async def _resolve_and_store(self, specifier: str, classification: ClassificationResult) -> Module:
        # A concurrent call may have stored it between our miss and this flight starting
        if (cached := self.cache.get(specifier)) is not None:
            return cached

        resolver = self.resolvers.get(classification.scheme)
        if resolver is None:
            raise UnsupportedModuleKindError(
                f"Unsupported module kind '{classification.scheme.value}': {specifier}", specifier
            )

        logger.debug(f"Resolving {specifier} via {resolver!r}")
        try:
            module = await resolver.resolve(specifier)
        except ModuleLoadError as e:
            if e.specifier is None:
                e.specifier = specifier
            logger.debug(f"Failed to load {specifier}: {e.kind.value}: {e}")
            raise
        except (OSError, ValueError, RuntimeError, httpx.HTTPError) as e:
            raise ModuleNotFoundError(f"Failed to load {specifier}: {e}", specifier) from e

        self.cache.put(specifier, module)
        return module

    async def aclose(self) -> None:
        """Close the HTTP client if this loader created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> ModuleLoader:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
