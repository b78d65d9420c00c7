# ABOUTME: Shared Click options for hardshelf CLI commands.
# ABOUTME: Provides reusable decorators for the API token and shelf status flags.

from collections.abc import Callable
from typing import Any

import click

from hardshelf.catalog.types import ShelfStatus

STATUS_CHOICES: dict[str, ShelfStatus] = {
    "want-to-read": ShelfStatus.WANT_TO_READ,
    "reading": ShelfStatus.CURRENTLY_READING,
    "read": ShelfStatus.READ,
}

token_option = click.option(
    "--token",
    envvar="HARDCOVER_API_TOKEN",
    required=True,
    help="Hardcover API token (default: $HARDCOVER_API_TOKEN).",
)


def status_option(default: str) -> Callable[[Any], Any]:
    """A --status option that converts its choice into a ShelfStatus."""
    return click.option(
        "-s",
        "--status",
        type=click.Choice(list(STATUS_CHOICES)),
        default=default,
        show_default=True,
        callback=lambda _ctx, _param, value: STATUS_CHOICES[value],
        help="Shelf to act on.",
    )
