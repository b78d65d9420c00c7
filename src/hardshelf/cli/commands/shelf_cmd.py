# ABOUTME: The `hardshelf shelf` command group for reading and editing Hardcover shelves.
# ABOUTME: Provides list, add, and remove subcommands.

import click
from rich.console import Console
from rich.table import Table

from hardshelf.catalog.factory import HardcoverClientFactory
from hardshelf.catalog.http import HardcoverError
from hardshelf.catalog.types import ShelfStatus
from hardshelf.cli.options import status_option, token_option
from hardshelf.core.sync import convert_rating, normalize_date


@click.group("shelf")
def shelf() -> None:
    """Manage your Hardcover shelves."""


@shelf.command("list")
@status_option("want-to-read")
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(1, 200),
    default=200,
    show_default=True,
    help="Maximum number of books to list.",
)
@token_option
@click.pass_obj
def shelf_list(
    factory: HardcoverClientFactory, status: ShelfStatus, limit: int, token: str
) -> None:
    """List the books on a shelf, newest first."""
    console = Console()
    with factory.create(token) as client:
        try:
            entries = client.list_shelf_by_status(status, limit)
        except HardcoverError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    if not entries:
        console.print("[yellow]No books on this shelf.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    for entry in entries:
        table.add_row(str(entry.catalog_id), entry.title, entry.author or "[dim]unknown[/dim]")

    console.print(table)
    console.print(f"\n[dim]{len(entries)} book(s)[/dim]")


@shelf.command("add")
@click.argument("catalog_id", type=int)
@status_option("want-to-read")
@click.option(
    "-r",
    "--rating",
    type=click.FloatRange(0.0, 10.0),
    default=None,
    help="Rating out of 10 (values of 5 or less are taken as already out of 5).",
)
@click.option("--finished-at", default=None, help="Date the book was finished.")
@token_option
@click.pass_obj
def shelf_add(
    factory: HardcoverClientFactory,
    catalog_id: int,
    status: ShelfStatus,
    rating: float | None,
    finished_at: str | None,
    token: str,
) -> None:
    """Put the book with CATALOG_ID on a shelf."""
    console = Console()
    with factory.create(token) as client:
        added = client.add_to_shelf(
            catalog_id,
            status,
            rating=convert_rating(rating),
            finished_at=normalize_date(finished_at),
        )

    if not added:
        console.print(f"[red]Failed to add book {catalog_id}.[/red]")
        raise SystemExit(1)
    console.print(f"Added book [bold]{catalog_id}[/bold] to [cyan]{status.name}[/cyan].")


@shelf.command("remove")
@click.argument("catalog_id", type=int)
@status_option("want-to-read")
@token_option
@click.pass_obj
def shelf_remove(
    factory: HardcoverClientFactory, catalog_id: int, status: ShelfStatus, token: str
) -> None:
    """Take the book with CATALOG_ID off a shelf."""
    console = Console()
    with factory.create(token) as client:
        removed = client.remove_from_shelf(catalog_id, status)

    if not removed:
        console.print(f"[yellow]Book {catalog_id} was not removed.[/yellow]")
        raise SystemExit(1)
    console.print(f"Removed book [bold]{catalog_id}[/bold] from [cyan]{status.name}[/cyan].")
