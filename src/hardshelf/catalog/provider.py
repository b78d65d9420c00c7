# ABOUTME: ShelfProvider protocol defining what the bulk synchronizer needs from a catalog.
# ABOUTME: HardcoverClient implements it; tests substitute fakes.

from typing import Protocol, runtime_checkable

from hardshelf.catalog.types import SearchCandidate, ShelfStatus


@runtime_checkable
class ShelfProvider(Protocol):
    """Protocol for a catalog that can resolve books and shelve them.

    search_book returns the single best match or None; add_to_shelf
    reports failure as False rather than raising.
    """

    def search_book(self, title: str, author: str) -> SearchCandidate | None: ...

    def add_to_shelf(
        self,
        catalog_id: int,
        status: ShelfStatus,
        rating: float | None = None,
        finished_at: str | None = None,
    ) -> bool: ...
