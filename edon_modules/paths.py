"""Path policy for edon's on-disk state.

All directories hang off a single home directory: ``$EDON_HOME`` when set,
otherwise ``~/.edon``. Libraries receive these paths via injection; this
module only provides the defaults.
"""

import os
from pathlib import Path

HOME_ENV_VAR = "EDON_HOME"
NPM_CACHE_DIRNAME = "npm-cache"


def get_edon_home() -> Path:
    """Get the edon home directory (not created here)."""
    if env_home := os.environ.get(HOME_ENV_VAR):
        return Path(env_home).expanduser()
    return Path.home() / ".edon"


def get_npm_cache_dir(home: Path | None = None) -> Path:
    """Get the npm package cache root: ``<home>/npm-cache``."""
    return (home or get_edon_home()) / NPM_CACHE_DIRNAME


def get_user_settings_path() -> Path:
    return Path.home() / ".edon" / "settings.yaml"


def get_project_settings_path() -> Path:
    return Path(".edon") / "settings.yaml"
