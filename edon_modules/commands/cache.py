"""Cache management commands for the edon CLI.

Inspect and clean the npm package cache at <home>/npm-cache/.
"""

from __future__ import annotations

import contextlib
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..errors import ModuleLoadError
from ..npm.package_cache import PackageCache
from ..settings import LoaderSettings


def _dir_size(path: Path) -> int:
    """Bytes used by regular files under a package version directory."""
    size = 0
    with contextlib.suppress(OSError):
        for entry in path.rglob("*"):
            with contextlib.suppress(OSError):
                if entry.is_file():
                    size += entry.stat().st_size
    return size


def _human_size(num_bytes: int) -> str:
    value = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def _package_cache(settings: LoaderSettings) -> PackageCache:
    return PackageCache(settings.npm_cache_dir)


@click.group(invoke_without_command=True)
@click.pass_context
def cache(ctx: click.Context):
    """Manage the npm package cache."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cache.command(name="path")
@click.pass_context
def cache_path(ctx: click.Context):
    """Show the package cache directory path."""
    cache_dir = ctx.obj["settings"].npm_cache_dir
    console.print(f"[cyan]{cache_dir}[/cyan]")

    if cache_dir.exists():
        console.print("[dim]Status: exists[/dim]")
    else:
        console.print("[dim]Status: not created yet[/dim]")


@cache.command(name="list")
@click.pass_context
def cache_list(ctx: click.Context):
    """List cached packages with sizes."""
    package_cache = _package_cache(ctx.obj["settings"])
    packages = package_cache.list_installed()

    if not packages:
        console.print("[dim]No cached packages found.[/dim]")
        console.print(f"[dim]Path: {package_cache.cache_dir}[/dim]")
        return

    table = Table(title="Cached Packages")
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Size", justify="right")

    total_size = 0
    for package in packages:
        size = _dir_size(package.path)
        total_size += size
        table.add_row(package.name, package.version, _human_size(size))

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {len(packages)} packages, {_human_size(total_size)}")


@cache.command(name="clean")
@click.option("--package", "package_name", default=None, help="Only remove this package (all versions)")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def cache_clean(ctx: click.Context, package_name: str | None, force: bool):
    """Remove cached packages so they are fetched again on next load."""
    package_cache = _package_cache(ctx.obj["settings"])
    packages = package_cache.list_installed()
    if package_name:
        packages = [p for p in packages if p.name == package_name]

    if not packages:
        console.print("[dim]No cached packages match - nothing to clean.[/dim]")
        return

    total_size = sum(_dir_size(p.path) for p in packages)
    console.print(f"\n[bold]Will remove {len(packages)} package versions ({_human_size(total_size)})[/bold]")

    if not force and not click.confirm("\nProceed with cleaning cache?"):
        console.print("[yellow]Aborted.[/yellow]")
        return

    try:
        removed = package_cache.remove(package_name) if package_name else package_cache.clear()
    except (OSError, ModuleLoadError) as e:
        console.print(f"[red]Error cleaning cache:[/red] {e}")
        ctx.exit(1)

    console.print(f"\n[green]Removed {removed} package versions ({_human_size(total_size)})[/green]")
