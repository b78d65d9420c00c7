# ABOUTME: CLI package for hardshelf, built on Click.
# ABOUTME: Defines the root command group, which owns the process-wide client factory.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from hardshelf.catalog.factory import HardcoverClientFactory
from hardshelf.catalog.http import DEFAULT_API_URL
from hardshelf.cli.commands import search_cmd, shelf_cmd, sync_cmd, whoami_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(package_name="hardshelf")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.option(
    "--api-url",
    envvar="HARDCOVER_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="Hardcover GraphQL endpoint.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, api_url: str) -> None:
    """hardshelf - match books and manage shelves on Hardcover."""
    _configure_logging(verbose)
    if ctx.obj is None:
        ctx.obj = HardcoverClientFactory(api_url=api_url)


cli.add_command(search_cmd.search)
cli.add_command(search_cmd.details)
cli.add_command(whoami_cmd.whoami)
cli.add_command(shelf_cmd.shelf)
cli.add_command(sync_cmd.sync)
