"""npm package installation into the on-disk package cache.

A version directory that exists is a complete install: packages are written
into a hidden staging directory next to the target and renamed into place
only on success, so a crash mid-install never produces a false cache hit.

Cached versions are never refreshed. ``latest`` means whatever was installed
under ``latest`` first.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from ..errors import CacheDirError
from ..errors import PackageInstallError
from ..settings import DEFAULT_ENTRY_FILE
from ..specifier import DEFAULT_VERSION
from ..specifier import NPM_PREFIX
from ..specifier import parse_package_ref
from .materializer import PackageMaterializer
from .materializer import PlaceholderMaterializer
from .metadata import PackageMetadata
from .package_cache import STAGING_PREFIX
from .package_cache import STAGING_SUFFIX
from .package_cache import PackageCache
from .registry import NpmRegistryClient

logger = logging.getLogger(__name__)


@dataclass
class _InstallLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class NpmPackageManager:
    """Resolves ``name@version`` to a local directory, installing on a miss."""

    def __init__(
        self,
        registry: NpmRegistryClient,
        cache_dir: Path,
        materializer: PackageMaterializer | None = None,
        entry_file: str = DEFAULT_ENTRY_FILE,
    ):
        """Initialize package manager.

        Args:
            registry: Registry client used on cache misses
            cache_dir: Package cache root (``<home>/npm-cache``)
            materializer: Writes package files (default: PlaceholderMaterializer)
            entry_file: Fallback entry file name
        """
        self.registry = registry
        self.cache = PackageCache(cache_dir)
        self.materializer = materializer or PlaceholderMaterializer(entry_file)
        self.entry_file = entry_file
        self._locks: dict[tuple[str, str], _InstallLock] = {}

    @property
    def cache_dir(self) -> Path:
        return self.cache.cache_dir

    async def install(self, reference: str) -> Path:
        """Install from a ``name[@version]`` reference (``npm:`` prefix optional).

        Raises:
            PackageInstallError: Reference cannot be parsed
        """
        try:
            ref = parse_package_ref(reference.removeprefix(NPM_PREFIX))
        except ValueError as e:
            raise PackageInstallError(f"Invalid package reference '{reference}': {e}") from e
        return await self.install_package(ref.name, ref.version)

    async def install_package(self, name: str, version: str = DEFAULT_VERSION) -> Path:
        """Return the local directory of ``name@version``, installing on a miss.

        Concurrent installs of the same package in this process wait for the
        first one instead of repeating the registry request.

        Raises:
            CacheDirError: Cache root cannot be created
            PackageNotFoundError: Registry does not know the package
            PackageInstallError: Network, metadata or write failure
        """
        target = self.cache.package_dir(name, version)
        if target.is_dir():
            logger.debug(f"Using cached package: {target}")
            return target

        key = (name, version)
        entry = self._locks.setdefault(key, _InstallLock())
        entry.users += 1
        try:
            async with entry.lock:
                if target.is_dir():
                    logger.debug(f"Package installed while waiting: {target}")
                    return target

                self._ensure_cache_dir()
                metadata = await self.registry.fetch_metadata(name, version)
                await self._install_atomically(metadata, target)
        finally:
            entry.users -= 1
            # Drop the lock once nobody holds or waits on it
            if entry.users == 0 and self._locks.get(key) is entry:
                del self._locks[key]

        logger.info(f"Installed {name}@{version} to {target}")
        return target

    def _ensure_cache_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheDirError(f"Cannot create package cache at {self.cache_dir}: {e}") from e

    async def _install_atomically(self, metadata: PackageMetadata, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(
                tempfile.mkdtemp(prefix=f"{STAGING_PREFIX}{target.name}-", suffix=STAGING_SUFFIX, dir=target.parent)
            )
        except OSError as e:
            raise PackageInstallError(f"Cannot create staging directory under {target.parent}: {e}") from e

        try:
            await self.materializer.materialize(metadata, staging)
            await asyncio.to_thread(os.rename, staging, target)
        except OSError as e:
            # Another process may have finished the same install first
            if target.is_dir():
                logger.info(f"Package already installed by another process: {target}")
                return
            raise PackageInstallError(f"Failed to install {metadata.name}@{metadata.version}: {e}") from e
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

    def __repr__(self) -> str:
        return f"NpmPackageManager({self.cache_dir})"
