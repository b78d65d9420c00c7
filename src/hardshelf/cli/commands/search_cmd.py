# ABOUTME: The `hardshelf search` and `hardshelf details` commands.
# ABOUTME: Resolve a title and author to the best-matching Hardcover book and print it.

import click
from rich.console import Console
from rich.table import Table

from hardshelf.catalog.factory import HardcoverClientFactory
from hardshelf.catalog.http import HardcoverError
from hardshelf.catalog.types import BookDetails, SearchCandidate
from hardshelf.cli.options import token_option


def _candidate_table(book: SearchCandidate) -> Table:
    table = Table(show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("ID", str(book.catalog_id))
    table.add_row("Title", f"[bold]{book.title}[/bold]")
    table.add_row("Author", book.author or "[dim]unknown[/dim]")
    if book.popularity_count is not None:
        table.add_row("Readers", str(book.popularity_count))
    return table


@click.command("search")
@click.argument("title")
@click.argument("author", default="")
@token_option
@click.pass_obj
def search(factory: HardcoverClientFactory, title: str, author: str, token: str) -> None:
    """Find the Hardcover book that best matches TITLE and AUTHOR."""
    console = Console()
    with factory.create(token) as client:
        try:
            match = client.search_book(title, author)
        except HardcoverError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    if match is None:
        console.print("[yellow]No matching book found.[/yellow]")
        return
    console.print(_candidate_table(match))


@click.command("details")
@click.argument("title")
@click.argument("author", default="")
@token_option
@click.pass_obj
def details(factory: HardcoverClientFactory, title: str, author: str, token: str) -> None:
    """Show the full Hardcover record for the best match of TITLE and AUTHOR."""
    console = Console()
    with factory.create(token) as client:
        try:
            book: BookDetails | None = client.get_book_details(title, author)
        except HardcoverError as exc:
            console.print(f"[red]{exc}[/red]")
            raise SystemExit(1) from exc

    if book is None:
        console.print("[yellow]No matching book found.[/yellow]")
        return

    table = _candidate_table(book)
    if book.release_date:
        table.add_row("Released", book.release_date)
    if book.pages:
        table.add_row("Pages", str(book.pages))
    if book.rating is not None:
        table.add_row("Rating", f"{book.rating:.2f}")
    for url in book.image_urls:
        table.add_row("Cover", url)
    console.print(table)
    if book.description:
        console.print(f"\n{book.description}")
