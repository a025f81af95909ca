"""Resolver contract.

Each scheme (local, CDN, npm, jsr) has one resolver implementing
``resolve(specifier) -> Module``. The loader holds a scheme -> resolver
mapping, so adding a scheme means adding a resolver, not touching dispatch.
"""

from abc import ABC
from abc import abstractmethod

from ..models import Module
from ..models import Scheme


class ModuleResolver(ABC):
    """Base class for scheme resolvers.

    Cancellation is the caller's task cancellation: implementations must let
    ``asyncio.CancelledError`` propagate and must not retry internally.
    """

    scheme: Scheme = Scheme.UNKNOWN

    @abstractmethod
    async def resolve(self, specifier: str) -> Module:
        """Resolve a classified specifier to its module body.

        Returns:
            Module whose specifier is the original, unnormalized string

        Raises:
            ModuleLoadError: Subclass matching the failure kind
        """
        ...
