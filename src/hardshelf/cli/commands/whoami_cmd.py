# ABOUTME: The `hardshelf whoami` command.
# ABOUTME: Prints the account id carried in the API token and whether shelf queries can use it.

import click
from rich.console import Console

from hardshelf.catalog.factory import HardcoverClientFactory
from hardshelf.catalog.identity import is_uuid
from hardshelf.cli.options import token_option


@click.command("whoami")
@token_option
@click.pass_obj
def whoami(factory: HardcoverClientFactory, token: str) -> None:
    """Show the Hardcover account id encoded in the API token."""
    console = Console()
    with factory.create(token) as client:
        user_id = client.get_user_identity()

    if user_id is None:
        console.print("[yellow]No user id found in token.[/yellow]")
        raise SystemExit(1)

    console.print(f"User id: [bold]{user_id}[/bold]")
    if not is_uuid(user_id):
        console.print("[dim]Not a UUID; shelf listing and removal are unavailable.[/dim]")
