"""Local filesystem resolver."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..errors import FileReadError
from ..errors import ModuleNotFoundError
from ..models import Module
from ..models import Scheme
from .base import ModuleResolver

logger = logging.getLogger(__name__)

FILE_URI_PREFIX = "file://"


class LocalResolver(ModuleResolver):
    """Reads modules from disk, relative to the working directory.

    Module-relative resolution is the evaluator's job; paths arrive here
    already relative to the process (or ``base_path``) or absolute.
    """

    scheme = Scheme.LOCAL

    def __init__(self, base_path: Path | None = None, encoding: str = "utf-8"):
        """Initialize resolver.

        Args:
            base_path: Directory for relative paths (default: cwd at resolve time)
            encoding: Text encoding of module files
        """
        self.base_path = base_path
        self.encoding = encoding

    def absolute_path(self, specifier: str) -> Path:
        """Make ``specifier`` absolute without touching the filesystem.

        Raises:
            ModuleNotFoundError: Path cannot be made absolute (e.g. cwd removed)
        """
        raw = specifier[len(FILE_URI_PREFIX) :] if specifier.startswith(FILE_URI_PREFIX) else specifier
        try:
            path = Path(raw).expanduser()
            if path.is_absolute():
                return path
            return (self.base_path or Path.cwd()) / path
        except (OSError, RuntimeError) as e:
            raise ModuleNotFoundError(f"Cannot resolve module path '{specifier}': {e}", specifier) from e

    async def resolve(self, specifier: str) -> Module:
        path = self.absolute_path(specifier)
        logger.debug(f"Reading local module: {path}")

        try:
            content = await asyncio.to_thread(path.read_text, encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"Failed to read module '{specifier}' at {path}: {e}", specifier) from e

        return Module(specifier=specifier, content=content, scheme=Scheme.LOCAL)

    def __repr__(self) -> str:
        return f"LocalResolver({self.base_path or 'cwd'})"
