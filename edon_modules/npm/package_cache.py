"""On-disk npm package cache.

Layout: ``<cache_dir>/<name>/<version>/`` (scoped names nest one level
deeper, ``<cache_dir>/@scope/name/<version>/``). Directory presence is the
cache-hit signal. Hidden ``.<version>-*.tmp`` siblings are in-progress
installs and are never reported as installed.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from ..errors import PackageInstallError
from ..specifier import DEFAULT_VERSION

STAGING_PREFIX = "."
STAGING_SUFFIX = ".tmp"


@dataclass
class InstalledPackage:
    """A package version present in the cache."""

    name: str
    version: str
    path: Path


def _check_segment(value: str, what: str) -> None:
    if value in ("", ".", "..") or "\\" in value or value.startswith(STAGING_PREFIX):
        raise PackageInstallError(f"Invalid package {what}: '{value}'")


class PackageCache:
    """Maps (name, version) to directories under a cache root."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = cache_dir

    def package_dir(self, name: str, version: str = DEFAULT_VERSION) -> Path:
        """Cache directory for ``name@version`` (may not exist).

        Raises:
            PackageInstallError: Name or version would escape the cache root
        """
        for segment in name.split("/"):
            _check_segment(segment, "name")
        if "/" in version:
            raise PackageInstallError(f"Invalid package version: '{version}'")
        _check_segment(version, "version")
        return self.cache_dir.joinpath(*name.split("/"), version)

    def is_installed(self, name: str, version: str = DEFAULT_VERSION) -> bool:
        return self.package_dir(name, version).is_dir()

    def list_installed(self) -> list[InstalledPackage]:
        """Scan for installed package versions, sorted by name then version."""
        if not self.cache_dir.is_dir():
            return []

        packages: list[InstalledPackage] = []
        for entry in self.cache_dir.iterdir():
            if not entry.is_dir() or entry.name.startswith(STAGING_PREFIX):
                continue
            if entry.name.startswith("@"):
                for scoped in entry.iterdir():
                    if scoped.is_dir() and not scoped.name.startswith(STAGING_PREFIX):
                        packages.extend(self._versions(f"{entry.name}/{scoped.name}", scoped))
            else:
                packages.extend(self._versions(entry.name, entry))

        packages.sort(key=lambda p: (p.name, p.version))
        return packages

    def _versions(self, name: str, package_root: Path) -> list[InstalledPackage]:
        return [
            InstalledPackage(name=name, version=version_dir.name, path=version_dir)
            for version_dir in package_root.iterdir()
            if version_dir.is_dir() and not version_dir.name.startswith(STAGING_PREFIX)
        ]

    def remove(self, name: str, version: str | None = None) -> int:
        """Delete one version, or every version when ``version`` is None.

        Returns:
            Number of version directories removed
        """
        if version is not None:
            target = self.package_dir(name, version)
            if not target.is_dir():
                return 0
            shutil.rmtree(target)
            return 1

        package_root = self.package_dir(name).parent
        removed = sum(1 for p in self.list_installed() if p.name == name)
        if package_root.is_dir():
            shutil.rmtree(package_root)
        return removed

    def clear(self) -> int:
        """Delete the whole cache. Returns the number of versions removed."""
        count = len(self.list_installed())
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir)
        return count

    def __repr__(self) -> str:
        return f"PackageCache({self.cache_dir})"
