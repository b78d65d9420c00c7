# ABOUTME: The `hardshelf sync` command for pushing read books onto a Hardcover shelf.
# ABOUTME: Runs the paced bulk synchronizer with a Rich progress bar and prints a summary.

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)

from hardshelf.catalog.factory import HardcoverClientFactory
from hardshelf.catalog.types import ShelfStatus
from hardshelf.cli.options import status_option, token_option
from hardshelf.core.sync import (
    DEFAULT_PACING_INTERVAL,
    BulkSynchronizer,
    ReadingItem,
    SyncItemResult,
)

ITEM_SEPARATOR = "::"


def parse_item(raw: str) -> ReadingItem:
    """Parse 'title::author[::rating[::date]]' into a ReadingItem.

    Raises:
        click.BadParameter: When the author is missing or the rating is not a number.
    """
    parts = [part.strip() for part in raw.split(ITEM_SEPARATOR)]
    if len(parts) < 2 or len(parts) > 4:
        raise click.BadParameter(f"expected title::author[::rating[::date]], got {raw!r}")

    rating: float | None = None
    if len(parts) >= 3 and parts[2]:
        try:
            rating = float(parts[2])
        except ValueError as exc:
            raise click.BadParameter(f"rating must be a number, got {parts[2]!r}") from exc

    date_read = parts[3] if len(parts) == 4 and parts[3] else None
    return ReadingItem(title=parts[0], author=parts[1], rating=rating, date_read=date_read)


def _make_progress(console: Console) -> Progress:
    """Create a Rich progress bar for the sync run."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    )


@click.command("sync")
@click.argument("items", nargs=-1, required=True)
@status_option("read")
@click.option(
    "--pace",
    type=click.FloatRange(min=0.0),
    default=DEFAULT_PACING_INTERVAL,
    show_default=True,
    help="Seconds to wait after each book.",
)
@token_option
@click.pass_obj
def sync(
    factory: HardcoverClientFactory,
    items: tuple[str, ...],
    status: ShelfStatus,
    pace: float,
    token: str,
) -> None:
    """Add each ITEM (title::author[::rating[::date]]) to a Hardcover shelf."""
    console = Console()
    reading_items = [parse_item(raw) for raw in items]

    progress = _make_progress(console)
    task_id = progress.add_task("Syncing", total=len(reading_items))

    def on_progress(index: int, total: int, result: SyncItemResult) -> None:
        progress.update(task_id, description=result.title, completed=index)

    with factory.create(token) as client:
        synchronizer = BulkSynchronizer(
            client.for_sync(), status=status, pacing_interval=pace
        )
        with progress:
            outcome = synchronizer.sync(reading_items, on_progress=on_progress)

    for detail in outcome.details:
        if not detail.success:
            console.print(f"  [yellow]{detail.title}[/yellow]: {detail.reason}")

    parts = []
    if outcome.successful:
        parts.append(f"[green]{outcome.successful} synced[/green]")
    if outcome.not_found:
        parts.append(f"[yellow]{outcome.not_found} not found[/yellow]")
    if outcome.failed:
        parts.append(f"[red]{outcome.failed} failed[/red]")

    console.print(f"\nDone: {', '.join(parts)}")
