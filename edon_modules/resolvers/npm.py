"""npm: scheme resolver."""

from __future__ import annotations

import asyncio
import logging

from ..errors import FileReadError
from ..errors import InvalidSpecifierError
from ..models import Module
from ..models import Scheme
from ..npm.metadata import find_entry_file
from ..npm.package_manager import NpmPackageManager
from ..specifier import NPM_PREFIX
from ..specifier import parse_package_ref
from .base import ModuleResolver

logger = logging.getLogger(__name__)


class NpmResolver(ModuleResolver):
    """Installs the package (or reuses the cached install) and reads its entry file."""

    scheme = Scheme.NPM

    def __init__(self, package_manager: NpmPackageManager):
        self.package_manager = package_manager

    async def resolve(self, specifier: str) -> Module:
        try:
            ref = parse_package_ref(specifier.removeprefix(NPM_PREFIX))
        except ValueError as e:
            raise InvalidSpecifierError(f"Invalid npm specifier '{specifier}': {e}", specifier) from e

        package_dir = await self.package_manager.install_package(ref.name, ref.version)
        entry = await asyncio.to_thread(find_entry_file, package_dir, self.package_manager.entry_file)
        logger.debug(f"Reading npm entry file for {ref}: {entry}")

        try:
            content = await asyncio.to_thread(entry.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"Cannot read entry file of {ref} at {entry}: {e}", specifier) from e

        return Module(specifier=specifier, content=content, scheme=Scheme.NPM)

    def __repr__(self) -> str:
        return f"NpmResolver({self.package_manager!r})"
