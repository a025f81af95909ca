"""npm registry metadata schema and entry-file lookup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


class DistInfo(BaseModel):
    """Distribution details of one published version."""

    model_config = ConfigDict(extra="allow")

    tarball: str | None = Field(None, description="Tarball download URL")
    shasum: str | None = Field(None, description="SHA-1 of the tarball")
    integrity: str | None = Field(None, description="Subresource integrity string")


class PackageMetadata(BaseModel):
    """Version document returned by ``GET <registry>/<name>/<version>``.

    Unknown registry fields are kept so the document can be written back out
    as the installed ``package.json``.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Package name")
    version: str = Field(..., description="Concrete version the registry resolved")
    main: str | None = Field(None, description="Entry file relative to the package root")
    dist: DistInfo | None = None


def entry_path(package_dir: Path, main: str | None, default: str) -> Path:
    """Resolve a ``main`` field to a path inside ``package_dir``.

    Falls back to ``default`` when ``main`` is empty or would escape the
    package directory.
    """
    if main:
        candidate = package_dir / main.removeprefix("./")
        try:
            inside = candidate.resolve().is_relative_to(package_dir.resolve())
        except (OSError, RuntimeError) as e:
            # Symlink loops raise RuntimeError before Python 3.13
            logger.warning(f"Cannot resolve main '{main}' in {package_dir}: {e}")
            return package_dir / default
        if inside:
            return candidate
        logger.warning(f"Ignoring main '{main}' outside package directory {package_dir}")
    return package_dir / default


def find_entry_file(package_dir: Path, default: str) -> Path:
    """Entry file of an installed package: ``package.json`` main, else ``default``."""
    manifest = package_dir / PACKAGE_JSON
    main = None
    if manifest.is_file():
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
            if isinstance(data, dict) and isinstance(data.get("main"), str):
                main = data["main"]
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {manifest}: {e}")
    return entry_path(package_dir, main, default)
