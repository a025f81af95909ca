"""Error taxonomy for module loading.

Every failure surfaced by the loader is a ModuleLoadError subclass carrying a
stable ErrorKind, so callers can branch on ``error.kind`` instead of matching
message text. Lower-level causes are chained with ``raise ... from exc``.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error kinds a caller can branch on."""

    INVALID_SPECIFIER = "invalid_specifier"
    UNSUPPORTED_MODULE_KIND = "unsupported_module_kind"
    MODULE_NOT_FOUND = "module_not_found"
    FILE_READ_FAILURE = "file_read_failure"
    PACKAGE_NOT_FOUND = "package_not_found"
    PACKAGE_INSTALL = "package_install"
    CACHE_DIR_FAILURE = "cache_dir_failure"
    JSR_NOT_IMPLEMENTED = "jsr_not_implemented"


class ModuleLoadError(Exception):
    """Base class for all module loading failures."""

    kind: ErrorKind = ErrorKind.MODULE_NOT_FOUND

    def __init__(self, message: str, specifier: str | None = None):
        self.message = message
        self.specifier = specifier
        super().__init__(message)


class InvalidSpecifierError(ModuleLoadError):
    """Raised when a specifier uses a known scheme but is malformed."""

    kind = ErrorKind.INVALID_SPECIFIER


class UnsupportedModuleKindError(ModuleLoadError):
    """Raised when no resolver is registered for a specifier's scheme."""

    kind = ErrorKind.UNSUPPORTED_MODULE_KIND


class ModuleNotFoundError(ModuleLoadError):
    """Raised when a module cannot be located (bad path, HTTP error, timeout)."""

    kind = ErrorKind.MODULE_NOT_FOUND


class FileReadError(ModuleLoadError):
    """Raised when a module file exists in principle but cannot be read."""

    kind = ErrorKind.FILE_READ_FAILURE


class PackageNotFoundError(ModuleLoadError):
    """Raised when the registry has no such package name/version."""

    kind = ErrorKind.PACKAGE_NOT_FOUND


class PackageInstallError(ModuleLoadError):
    """Raised when a package was found but could not be installed."""

    kind = ErrorKind.PACKAGE_INSTALL


class CacheDirError(ModuleLoadError):
    """Raised when the package cache directory cannot be created."""

    kind = ErrorKind.CACHE_DIR_FAILURE


class JSRNotImplementedError(ModuleLoadError):
    """Raised for every jsr: specifier until a JSR resolver exists."""

    kind = ErrorKind.JSR_NOT_IMPLEMENTED
