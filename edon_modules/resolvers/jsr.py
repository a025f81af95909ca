"""JSR resolver placeholder.

The jsr: scheme and its error kind are reserved so a real implementation can
be registered with the loader later without touching dispatch.
"""

from ..errors import JSRNotImplementedError
from ..models import Module
from ..models import Scheme
from .base import ModuleResolver


class JsrResolver(ModuleResolver):
    scheme = Scheme.JSR

    async def resolve(self, specifier: str) -> Module:
        raise JSRNotImplementedError(f"JSR modules are not supported yet: {specifier}", specifier)

    def __repr__(self) -> str:
        return "JsrResolver(not-implemented)"
