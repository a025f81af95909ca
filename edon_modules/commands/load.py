"""Load a module through the full loader and print its source."""

from __future__ import annotations

import asyncio
import sys

import click

from ..console import console
from ..console import err_console
from ..errors import ModuleLoadError
from ..loader import ModuleLoader
from ..models import Module
from ..settings import LoaderSettings
from ..ui.error_display import display_load_error


async def _load(settings: LoaderSettings, specifier: str, timeout: float | None) -> Module:
    async with ModuleLoader(settings) as loader:
        return await loader.load(specifier, timeout=timeout)


@click.command("load")
@click.argument("specifier")
@click.option("--timeout", type=float, default=None, help="Overall deadline in seconds")
@click.option("--info", is_flag=True, help="Print scheme and size instead of the source")
@click.pass_context
def load_cmd(ctx: click.Context, specifier: str, timeout: float | None, info: bool):
    """Resolve SPECIFIER (path, URL, npm:..., jsr:...) and print its source."""
    settings: LoaderSettings = ctx.obj["settings"]
    try:
        module = asyncio.run(_load(settings, specifier, timeout))
    except ModuleLoadError as e:
        sys.exit(display_load_error(err_console, e, verbose=ctx.obj["verbose"]))

    if info:
        console.print(f"[bold]Specifier:[/bold] {module.specifier}")
        console.print(f"[bold]Scheme:[/bold] {module.scheme.value}")
        console.print(f"[bold]Size:[/bold] {len(module.content)} characters")
        return

    click.echo(module.content, nl=not module.content.endswith("\n"))
