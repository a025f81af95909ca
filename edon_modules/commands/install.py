"""Install npm packages into the package cache."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from ..console import console
from ..console import err_console
from ..errors import ModuleLoadError
from ..loader import ModuleLoader
from ..settings import LoaderSettings
from ..ui.error_display import display_load_error


async def _install_all(settings: LoaderSettings, packages: tuple[str, ...]) -> list[tuple[str, Path]]:
    installed: list[tuple[str, Path]] = []
    async with ModuleLoader(settings) as loader:
        for package in packages:
            console.print(f"Installing {package}...")
            path = await loader.package_manager.install(package)
            console.print(f"[green]✓ Installed {package} at {path}[/green]")
            installed.append((package, path))
    return installed


@click.command("install")
@click.argument("packages", nargs=-1, required=True)
@click.pass_context
def install_cmd(ctx: click.Context, packages: tuple[str, ...]):
    """Install npm packages (name[@version]) into the local package cache."""
    settings: LoaderSettings = ctx.obj["settings"]
    try:
        asyncio.run(_install_all(settings, packages))
    except ModuleLoadError as e:
        sys.exit(display_load_error(err_console, e, verbose=ctx.obj["verbose"]))
