"""npm package support: registry metadata, installation and the package cache."""

from .materializer import PackageMaterializer
from .materializer import PlaceholderMaterializer
from .metadata import PackageMetadata
from .metadata import find_entry_file
from .package_cache import InstalledPackage
from .package_cache import PackageCache
from .package_manager import NpmPackageManager
from .registry import NpmRegistryClient

__all__ = [
    "InstalledPackage",
    "NpmPackageManager",
    "NpmRegistryClient",
    "PackageCache",
    "PackageMaterializer",
    "PackageMetadata",
    "PlaceholderMaterializer",
    "find_entry_file",
]
