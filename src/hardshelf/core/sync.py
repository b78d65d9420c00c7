# ABOUTME: Bulk synchronization of locally-known reading records onto Hardcover shelves.
# ABOUTME: Processes items one at a time with fixed pacing; one item's failure never aborts the batch.

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from hardshelf.catalog.provider import ShelfProvider
from hardshelf.catalog.types import ShelfStatus

logger = logging.getLogger(__name__)

# Seconds to wait after every item to stay under Hardcover's per-account rate limit.
DEFAULT_PACING_INTERVAL = 3.0

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y")

NOT_FOUND_REASON = "Book not found on Hardcover"
NO_TITLE_REASON = "Title is required"
ADD_FAILED_REASON = "Failed to add book to shelf"


@dataclass
class ReadingItem:
    """A book the caller knows has been read, with an optional 10-point rating."""

    title: str
    author: str
    rating: float | None = None
    date_read: str | None = None


@dataclass
class SyncItemResult:
    """Per-item record in a SyncOutcome."""

    title: str
    author: str
    success: bool
    reason: str | None = None


@dataclass
class SyncOutcome:
    """Summary of a sync run, with details in input order."""

    successful: int = 0
    failed: int = 0
    not_found: int = 0
    details: list[SyncItemResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.successful + self.failed + self.not_found


def convert_rating(rating: float | None) -> float | None:
    """Rescale a 10-point rating to Hardcover's 5-point scale in half steps.

    Values of 5 or below are assumed to already be on the 5-point scale.
    That misreads a genuine 10-point rating of 5 or less; the heuristic is
    kept until the source's rating domain is confirmed.
    """
    if rating is None or rating <= 0:
        return None
    value = rating if rating <= 5 else rating / 2
    value = round(value * 2) / 2
    return min(max(value, 0.5), 5.0)


def normalize_date(value: str | None) -> str | None:
    """Parse a caller-supplied date into an ISO-8601 UTC timestamp.

    Accepts YYYY-MM-DD, YYYY/MM/DD, MM/DD/YYYY, and ISO-8601 datetimes.
    Returns None for empty or unparseable input.
    """
    if not value or not value.strip():
        return None
    text = value.strip()

    parsed: datetime | None = None
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable date %r, omitting it", value)
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC).isoformat()
    except (ValueError, OverflowError):
        logger.debug("Date %r is out of range in UTC, omitting it", value)
        return None


# Type for progress callbacks: (index, total, item_result) -> None
ProgressFn = Callable[[int, int, SyncItemResult], None]


class BulkSynchronizer:
    """Pushes reading records into Hardcover one at a time.

    Hardcover rate-limits per account and has no batch mutation, so items
    are never processed concurrently and every item is followed by a fixed
    pause, whatever its outcome.
    """

    def __init__(
        self,
        provider: ShelfProvider,
        *,
        status: ShelfStatus = ShelfStatus.READ,
        pacing_interval: float = DEFAULT_PACING_INTERVAL,
    ) -> None:
        self._provider = provider
        self._status = status
        self._pacing_interval = pacing_interval

    def sync(
        self, items: Iterable[ReadingItem], *, on_progress: ProgressFn | None = None
    ) -> SyncOutcome:
        """Resolve and shelve each item, recording one result per item.

        For each item: search for a match (not found if none), then add it
        to the shelf with the converted rating and normalized date. Any
        exception raised for an item is recorded as a failure with its
        message and processing moves on.

        Args:
            items: Records to push, processed in order.
            on_progress: Optional callback invoked after each item. A failing
                callback is logged and does not stop the batch.

        Returns:
            SyncOutcome with counts and per-item details in input order.
        """
        batch = list(items)
        outcome = SyncOutcome()
        total = len(batch)

        for index, item in enumerate(batch, start=1):
            try:
                result = self._sync_item(item, outcome)
            except Exception as exc:
                logger.warning("Sync failed for %r by %r: %s", item.title, item.author, exc)
                result = SyncItemResult(item.title, item.author, success=False, reason=str(exc))
                outcome.failed += 1

            outcome.details.append(result)
            if on_progress is not None:
                try:
                    on_progress(index, total, result)
                except Exception as exc:
                    logger.warning("Progress callback failed for %r: %s", item.title, exc)

            time.sleep(self._pacing_interval)

        logger.info(
            "Sync complete: %d successful, %d failed, %d not found",
            outcome.successful,
            outcome.failed,
            outcome.not_found,
        )
        return outcome

    def _sync_item(self, item: ReadingItem, outcome: SyncOutcome) -> SyncItemResult:
        """Sync one item and bump the matching counter. Exceptions propagate."""
        if not item.title or not item.title.strip():
            outcome.failed += 1
            return SyncItemResult(item.title, item.author, success=False, reason=NO_TITLE_REASON)

        match = self._provider.search_book(item.title, item.author)
        if match is None:
            outcome.not_found += 1
            return SyncItemResult(
                item.title, item.author, success=False, reason=NOT_FOUND_REASON
            )

        added = self._provider.add_to_shelf(
            match.catalog_id,
            self._status,
            rating=convert_rating(item.rating),
            finished_at=normalize_date(item.date_read),
        )
        if not added:
            outcome.failed += 1
            return SyncItemResult(
                item.title, item.author, success=False, reason=ADD_FAILED_REASON
            )

        outcome.successful += 1
        return SyncItemResult(item.title, item.author, success=True)
