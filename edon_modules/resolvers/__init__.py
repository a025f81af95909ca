"""Scheme resolvers.

- LocalResolver: files on disk
- CdnResolver: http(s) URLs
- NpmResolver: npm: packages via the package cache
- JsrResolver: reserved jsr: scheme (always fails)
"""

from .base import ModuleResolver
from .cdn import CdnResolver
from .jsr import JsrResolver
from .local import LocalResolver
from .npm import NpmResolver

__all__ = [
    "CdnResolver",
    "JsrResolver",
    "LocalResolver",
    "ModuleResolver",
    "NpmResolver",
]
