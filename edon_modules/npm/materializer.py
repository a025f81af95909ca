"""Package content materializers.

A materializer fills an empty directory with a package's files. Archive
download and extraction are not done here; the default writes the registry
metadata plus a placeholder entry file, which is enough for the loader's
contract of "a directory containing the package's entry file".
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from ..settings import DEFAULT_ENTRY_FILE
from .metadata import PACKAGE_JSON
from .metadata import PackageMetadata
from .metadata import entry_path

PLACEHOLDER_TEMPLATE = "// {name}@{version}: package contents are not materialized\nexport {{}};\n"


class PackageMaterializer(Protocol):
    """Protocol for writing a package's files into a directory."""

    async def materialize(self, metadata: PackageMetadata, target: Path) -> None:
        """Write the package into ``target`` (exists and is empty)."""
        ...


class PlaceholderMaterializer:
    """Writes ``package.json`` and a placeholder entry file."""

    def __init__(self, entry_file: str = DEFAULT_ENTRY_FILE):
        self.entry_file = entry_file

    async def materialize(self, metadata: PackageMetadata, target: Path) -> None:
        await asyncio.to_thread(self._write, metadata, target)

    def _write(self, metadata: PackageMetadata, target: Path) -> None:
        (target / PACKAGE_JSON).write_text(metadata.model_dump_json(indent=2, exclude_none=True), encoding="utf-8")

        entry = entry_path(target, metadata.main, self.entry_file)
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text(PLACEHOLDER_TEMPLATE.format(name=metadata.name, version=metadata.version), encoding="utf-8")
