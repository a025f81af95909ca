"""Loader settings merged from user/project YAML files and the environment.

Precedence (lowest to highest):
1. Built-in defaults
2. User settings (~/.edon/settings.yaml)
3. Project settings (.edon/settings.yaml)
4. Environment variables (EDON_HOME, EDON_NPM_REGISTRY, EDON_REQUEST_TIMEOUT,
   EDON_LOG_LEVEL)

Only the ``modules`` section of each settings file is read, for example::

    modules:
      registry_url: https://registry.npmjs.org
      request_timeout: 10
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from .paths import get_edon_home
from .paths import get_npm_cache_dir
from .paths import get_project_settings_path
from .paths import get_user_settings_path

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_ENTRY_FILE = "index.js"

_ENV_OVERRIDES = {
    "EDON_HOME": "home",
    "EDON_NPM_REGISTRY": "registry_url",
    "EDON_REQUEST_TIMEOUT": "request_timeout",
    "EDON_LOG_LEVEL": "log_level",
}


class LoaderSettings(BaseModel):
    """Configuration for the module loader and npm package manager."""

    model_config = ConfigDict(frozen=True)

    home: Path = Field(default_factory=get_edon_home, description="Root of edon's on-disk state")
    registry_url: str = Field(default=DEFAULT_REGISTRY_URL, description="npm registry base URL")
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP timeout in seconds")
    entry_file: str = Field(default=DEFAULT_ENTRY_FILE, description="Fallback package entry file")
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    @field_validator("home")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def npm_cache_dir(self) -> Path:
        return get_npm_cache_dir(self.home)


def _read_settings(path: Path) -> dict[str, Any]:
    """Read the ``modules`` section of a settings file, or {} if absent/broken."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return {}

    section = data.get("modules") if isinstance(data, dict) else None
    if not isinstance(section, dict):
        return {}
    return section


def load_settings(
    user_path: Path | None = None,
    project_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> LoaderSettings:
    """Build LoaderSettings from every configured scope.

    Args:
        user_path: User settings file (default: ~/.edon/settings.yaml)
        project_path: Project settings file (default: .edon/settings.yaml)
        environ: Environment mapping (default: os.environ)

    Returns:
        Merged LoaderSettings

    Raises:
        ValueError: Merged values fail validation (e.g. negative timeout)
    """
    environ = os.environ if environ is None else environ

    merged: dict[str, Any] = {}
    merged.update(_read_settings(user_path or get_user_settings_path()))
    merged.update(_read_settings(project_path or get_project_settings_path()))

    for env_key, field_name in _ENV_OVERRIDES.items():
        if value := environ.get(env_key):
            merged[field_name] = value

    try:
        return LoaderSettings(**merged)
    except ValidationError as e:
        raise ValueError(f"Invalid module loader settings: {e}") from e
