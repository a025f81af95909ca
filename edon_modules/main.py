"""edon module tooling - command-line entry point."""

import logging

import click

from .commands.cache import cache as cache_group
from .commands.install import install_cmd
from .commands.load import load_cmd
from .logging_setup import init_json_logging
from .settings import load_settings

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Log level (default: settings or EDON_LOG_LEVEL)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="JSONL log file path")
@click.option("--verbose", "-v", is_flag=True, help="Show underlying causes of errors")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, verbose: bool):
    """Resolve, fetch and cache modules for the edon runtime."""
    try:
        settings = load_settings()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    init_json_logging(log_file, log_level or settings.log_level)
    logger.debug(f"Loaded settings: home={settings.home} registry={settings.registry_url}")
    ctx.obj = {"settings": settings, "verbose": verbose}


cli.add_command(install_cmd)
cli.add_command(load_cmd)
cli.add_command(cache_group)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
