"""Module resolution and caching for the edon script runtime.

Public API:
- ModuleLoader: classify, cache and dispatch module specifiers
- classify: specifier -> ClassificationResult
- ContentCache: process-lifetime specifier -> Module cache
- ModuleLoadError and its kind-specific subclasses
"""

from .cache import ContentCache
from .errors import CacheDirError
from .errors import ErrorKind
from .errors import FileReadError
from .errors import InvalidSpecifierError
from .errors import JSRNotImplementedError
from .errors import ModuleLoadError
from .errors import ModuleNotFoundError
from .errors import PackageInstallError
from .errors import PackageNotFoundError
from .errors import UnsupportedModuleKindError
from .loader import ModuleLoader
from .models import ClassificationResult
from .models import Module
from .models import PackageRef
from .models import Scheme
from .settings import LoaderSettings
from .settings import load_settings
from .specifier import classify

__all__ = [
    "CacheDirError",
    "ClassificationResult",
    "ContentCache",
    "ErrorKind",
    "FileReadError",
    "InvalidSpecifierError",
    "JSRNotImplementedError",
    "LoaderSettings",
    "Module",
    "ModuleLoadError",
    "ModuleLoader",
    "ModuleNotFoundError",
    "PackageInstallError",
    "PackageNotFoundError",
    "PackageRef",
    "Scheme",
    "UnsupportedModuleKindError",
    "classify",
    "load_settings",
]
